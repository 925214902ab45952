"""
Lexical validation for KDL documents.

The checks here are deliberately shallow: they scan the raw text with a few
regular expressions and never build a parse tree. That keeps validation cheap
enough to run on every keystroke, at the price of some false positives and
negatives (documented per check).

Pipeline order, which is also the order findings are reported in:
1. Unclosed string literals, line by line
2. Invalid escape sequences inside non-raw strings
3. Brace balance across the whole document
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional

from lsprotocol import types

from .models import Finding, Snapshot

logger = logging.getLogger(__name__)

# Raw strings (r"...", r#"..."#, #"..."#) come first so their bodies are never
# checked for escapes. The closing fence must repeat the opening one.
STRING_LITERAL = re.compile(
    r'(?<![\w#-])r(?P<raw_fence>#*)"(?P<raw_body>.*?)"(?P=raw_fence)'
    r'|(?<![\w#-])(?P<hash_fence>#+)"(?P<hash_body>.*?)"(?P=hash_fence)'
    r'|"""(?P<multi_body>(?:\\.|[^\\])*?)"""'
    r'|"(?P<body>(?:\\.|[^"\\])*)"',
    re.DOTALL,
)

# Valid escapes are consumed whole so that an escaped backslash is never
# mistaken for the start of the next escape.
ESCAPE_SEQUENCE = re.compile(
    r'\\(?:[nrtbf"\\]|u[0-9A-Fa-f]{4}|U[0-9A-Fa-f]{8}|(?P<bad>.?))',
    re.DOTALL,
)

UNESCAPED_QUOTE = re.compile(r'(?<!\\)"')
COMMENT_PREFIXES = ("//", "/*")
MULTILINE_QUOTE = '"""'
LINE_BREAKS = ("\n", "\r")


@dataclass(frozen=True)
class InvalidEscape:
    """An escape sequence outside the allow-list, with absolute offsets."""
    start: int
    end: int
    text: str

    def describe(self) -> str:
        if self.text == "\\":
            return "Invalid escape sequence '\\' at end of line"
        return f"Invalid escape sequence '{self.text}'"


def find_invalid_escapes(text: str) -> List[InvalidEscape]:
    """
    Find disallowed escape sequences inside non-raw string literals.

    Offsets are tracked during the scan itself, so repeated occurrences of
    the same escape text are each reported at their own location. A
    backslash followed by a line break covers only the backslash.

    Args:
        text: Full document text

    Returns:
        Invalid escapes in document order
    """
    escapes: List[InvalidEscape] = []

    for literal in STRING_LITERAL.finditer(text):
        for group in ("multi_body", "body"):
            if literal.group(group) is not None:
                body_start = literal.start(group)
                body = literal.group(group)
                break
        else:
            continue  # raw string

        for match in ESCAPE_SEQUENCE.finditer(body):
            bad = match.group("bad")
            if bad is None:
                continue
            start = body_start + match.start()
            if bad in LINE_BREAKS:
                escapes.append(InvalidEscape(start=start, end=start + 1, text="\\"))
            else:
                escapes.append(InvalidEscape(start=start, end=body_start + match.end(), text=match.group(0)))

    return escapes


def is_comment_line(line: str) -> bool:
    return line.strip().startswith(COMMENT_PREFIXES)


def check_unclosed_strings(snapshot: Snapshot) -> List[Finding]:
    """
    Flag lines with an odd number of unescaped double quotes.

    Comment lines and lines containing a triple quote are skipped. Each line
    is judged on its own, so the interior of a multi-line string can still
    be misreported.
    """
    findings = []
    for number, line in enumerate(snapshot.lines):
        if is_comment_line(line):
            continue
        quotes = len(UNESCAPED_QUOTE.findall(line))
        if quotes % 2 != 0 and MULTILINE_QUOTE not in line:
            start = snapshot.line_starts[number]
            findings.append(Finding(
                start=start,
                end=start + len(line),
                severity=types.DiagnosticSeverity.Error,
                message="Unclosed string literal",
            ))
    return findings


def check_invalid_escapes(snapshot: Snapshot) -> List[Finding]:
    return [
        Finding(
            start=escape.start,
            end=escape.end,
            severity=types.DiagnosticSeverity.Error,
            message=escape.describe(),
        )
        for escape in find_invalid_escapes(snapshot.text)
    ]


def check_brace_balance(snapshot: Snapshot) -> Optional[Finding]:
    """
    Compare the number of ``{`` and ``}`` characters in the whole text.

    Braces inside strings and comments are counted too.
    """
    opening = snapshot.text.count("{")
    closing = snapshot.text.count("}")
    if opening == closing:
        return None
    return Finding(
        start=0,
        end=len(snapshot.text),
        severity=types.DiagnosticSeverity.Warning,
        message=f"Unmatched braces: {opening} opening, {closing} closing",
    )


def _brace_findings(snapshot: Snapshot) -> List[Finding]:
    finding = check_brace_balance(snapshot)
    return [finding] if finding else []


VALIDATORS: List[Callable[[Snapshot], List[Finding]]] = [
    check_unclosed_strings,
    check_invalid_escapes,
    _brace_findings,
]


def validate_document(snapshot: Snapshot) -> List[Finding]:
    """
    Run every validator over a snapshot.

    A validator that raises is logged and skipped, so a single malformed
    document yields a partial list instead of an error.

    Args:
        snapshot: Document snapshot to validate

    Returns:
        Findings in discovery order
    """
    findings: List[Finding] = []
    for validator in VALIDATORS:
        try:
            findings.extend(validator(snapshot))
        except Exception as e:
            logger.error(f"Validator {validator.__name__} failed on {snapshot.uri}: {e}")
    logger.debug(f"Validated {snapshot.uri} v{snapshot.version}: {len(findings)} findings")
    return findings
