"""
Coordinate transformation utilities for the Niri KDL language server.

The scanners report absolute string offsets; the protocol speaks in
(line, UTF-16 character) positions. This module converts between the two.
"""

from typing import Iterable, List, Optional

from lsprotocol import types

from .models import Finding, Snapshot

DIAGNOSTIC_SOURCE = "kdl"


class CoordinateTransformer:
    """Utility class for transforming offsets into protocol coordinates."""

    @staticmethod
    def offsets_to_range(snapshot: Snapshot, start: int, end: int) -> types.Range:
        """
        Build an LSP range covering ``text[start:end]``.

        Args:
            snapshot: Snapshot the offsets refer to
            start: Absolute start offset (inclusive)
            end: Absolute end offset (exclusive)

        Returns:
            Range in document coordinates
        """
        return types.Range(
            start=snapshot.position_at(start),
            end=snapshot.position_at(max(start, end)),
        )

    @staticmethod
    def finding_to_diagnostic(snapshot: Snapshot, finding: Finding) -> types.Diagnostic:
        return types.Diagnostic(
            range=CoordinateTransformer.offsets_to_range(snapshot, finding.start, finding.end),
            severity=finding.severity,
            message=finding.message,
            source=DIAGNOSTIC_SOURCE,
        )

    @staticmethod
    def findings_to_diagnostics(
        snapshot: Snapshot,
        findings: Iterable[Finding],
        limit: Optional[int] = None,
    ) -> List[types.Diagnostic]:
        """
        Convert findings into diagnostics, keeping discovery order.

        Args:
            snapshot: Snapshot the findings were computed from
            findings: Findings in discovery order
            limit: Optional maximum count; findings beyond it are dropped

        Returns:
            List of protocol diagnostics
        """
        findings = list(findings)
        if limit is not None:
            findings = findings[:max(0, limit)]
        return [CoordinateTransformer.finding_to_diagnostic(snapshot, f) for f in findings]
