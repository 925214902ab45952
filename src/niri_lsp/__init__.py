"""Language server for Niri KDL configuration files."""
