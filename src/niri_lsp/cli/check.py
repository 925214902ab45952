from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import click
from lsprotocol import types

from niri_lsp.cli.utils import configure_logging, echo_json, fail
from niri_lsp.config.models import ServerSettings
from niri_lsp.lsp.utils.coordinate_transformer import CoordinateTransformer
from niri_lsp.lsp.utils.kdl_scanner import validate_document
from niri_lsp.lsp.utils.models import Snapshot

SEVERITY_NAMES = {
    types.DiagnosticSeverity.Error: "error",
    types.DiagnosticSeverity.Warning: "warning",
    types.DiagnosticSeverity.Information: "info",
    types.DiagnosticSeverity.Hint: "hint",
}


def check_file(path: Path, settings: ServerSettings) -> Dict[str, Any]:
    """Validate one file and describe the result as a JSON-friendly dict.

    Positions are 1-based lines and columns, as compilers print them.
    """
    snapshot = Snapshot(
        uri=path.resolve().as_uri(),
        version=0,
        language_id="kdl",
        text=path.read_text(encoding="utf-8"),
    )
    diagnostics = CoordinateTransformer.findings_to_diagnostics(
        snapshot, validate_document(snapshot), limit=settings.max_number_of_problems
    )
    problems = [
        {
            "line": d.range.start.line + 1,
            "column": d.range.start.character + 1,
            "severity": SEVERITY_NAMES.get(d.severity, "error"),
            "message": d.message,
        }
        for d in diagnostics
    ]
    has_errors = any(p["severity"] == "error" for p in problems)
    return {
        "path": str(path),
        "status": "error" if has_errors else "ok",
        "problems": problems,
    }


def format_check_results(results: List[Dict[str, Any]]) -> str:
    """Format check results for human-readable output"""
    output = []
    clean: List[str] = []
    failed: List[Tuple[str, List[Dict[str, Any]]]] = []

    for result in results:
        if result["problems"]:
            failed.append((result["path"], result["problems"]))
        else:
            clean.append(result["path"])

    output.append(f"Checked {len(results)} files ({len(clean)} clean, {len(failed)} with problems):")
    output.append("")

    for path, problems in failed:
        output.append(f"  ✗ {path}")
        for p in problems:
            output.append(f"    {p['line']}:{p['column']} {p['severity']}: {p['message']}")
    if failed:
        output.append("")

    for path in clean:
        output.append(f"  ✓ {path}")

    return "\n".join(output)


@click.command(name="check")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--max-problems", type=click.IntRange(min=0), help="Maximum problems reported per file (defaults to 100)")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def check(paths: Tuple[Path, ...], json_output: bool, max_problems: Optional[int], debug: bool):
    """Check KDL files for lexical problems.

    Runs the same checks the language server publishes as diagnostics:
    unclosed strings, invalid escape sequences and unbalanced braces.
    Exits with status 1 when any file has an error.

    Examples:
        niri-lsp check ~/.config/niri/config.kdl
        niri-lsp check a.kdl b.kdl --json-output
        niri-lsp check config.kdl --max-problems 5
    """
    configure_logging(debug)

    settings = ServerSettings()
    if max_problems is not None:
        settings = ServerSettings(max_number_of_problems=max_problems)

    try:
        results = [check_file(path, settings) for path in paths]
    except Exception as e:
        fail(e, json_output, debug)

    if json_output:
        echo_json("ok", result=results)
    else:
        click.echo(format_check_results(results))

    if any(r["status"] == "error" for r in results):
        raise SystemExit(1)
