"""
Error Reporting

Rust Pattern: rustc_errors::Diagnostic

Every user-facing failure of an expansion is one of the `ShadowgenError`
subclasses below. The driver turns the exception into a `Diagnostic`,
records it on the `ErrorReporter` and renders it rustc style.
"""

import os
import sys
from dataclasses import dataclass
from typing import Dict, List, Optional

from .source_location import SourceLocation
from ..utils.config import COLOR_ENV_VAR


# ---------------------------------------------------------------------------
# ANSI styling (off when NO_COLOR is set or SHADOWGEN_COLOR says so)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    setting = os.environ.get(COLOR_ENV_VAR, "").lower()
    if setting in ("0", "false", "no", "never"):
        return False
    if setting in ("1", "true", "yes", "always"):
        return True
    return sys.stderr.isatty()


_BOLD = "\033[1m"
_RED = "\033[31m"
_BLUE = "\033[34m"
_CYAN = "\033[36m"
_RESET = "\033[0m"


def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color or not codes:
        return text
    return "".join(codes) + text + _RESET


# ---------------------------------------------------------------------------
# Diagnostic
# ---------------------------------------------------------------------------

@dataclass
class Diagnostic:
    """
    One reported error.

    Rust Pattern: rustc_errors::Diagnostic
    """
    message: str
    location: Optional[SourceLocation]
    code: Optional[str] = None
    help: Optional[str] = None
    note: Optional[str] = None
    label: Optional[str] = None


def _token_width(line: str, col0: int) -> int:
    """Width of the token starting at col0, used when a span has no end."""
    width = 0
    for ch in line[col0:]:
        if ch.isspace() or ch in ",;()[]{}<>":
            break
        width += 1
    return max(1, width)


def _render(diag: Diagnostic, source_files: Dict[str, str], color: bool) -> str:
    """
    Render a diagnostic the way rustc does::

        error[E0102]: unsupported self type `(A, B)`
         --> lib.rs:2:6
          |
        2 | impl (A, B) {
          |      ^^^^^^ expected a path type
          |
          = help: implement the shadow type for a named type
    """
    code = f"[{diag.code}]" if diag.code else ""
    lines = [
        _style(f"error{code}", _BOLD, _RED, color=color)
        + _style(f": {diag.message}", _BOLD, color=color)
    ]

    loc = diag.location
    source = source_files.get(loc.file) if loc is not None else None
    src_lines = source.split("\n") if source is not None else []
    last_line = loc.line if loc is not None else 1
    if loc is not None and loc.end_line > loc.line:
        last_line = min(loc.end_line, max(len(src_lines), loc.line))
    gutter = len(str(last_line))
    pad = " " * gutter

    def blue(text: str) -> str:
        return _style(text, _BOLD, _BLUE, color=color)

    if loc is None:
        lines.append(blue(f"{pad}--> ") + "<unknown location>")
    else:
        lines.append(blue(f"{pad}--> ") + str(loc))

    if loc is not None and source is not None and 0 < loc.line <= len(src_lines):
        lines.append(blue(f"{pad} |"))
        for number in range(loc.line, last_line + 1):
            text = src_lines[number - 1]
            lines.append(blue(f"{str(number).rjust(gutter)} | ") + text)
            if number != loc.line:
                continue
            col0 = max(loc.column, 1) - 1
            if loc.end_line <= loc.line and loc.end_column > loc.column:
                width = loc.end_column - loc.column
            elif loc.end_line > loc.line:
                width = max(1, len(text.rstrip()) - col0)
            else:
                width = _token_width(text, col0)
            marker = " " * col0 + "^" * width
            if diag.label:
                marker += f" {diag.label}"
            lines.append(blue(f"{pad} | ") + _style(marker, _BOLD, _RED, color=color))

    notes = [("help", diag.help), ("note", diag.note)]
    if any(body for _, body in notes):
        lines.append(blue(f"{pad} |"))
        for kind, body in notes:
            if body:
                lines.append(
                    _style(f"{pad} = ", _BOLD, _CYAN, color=color)
                    + _style(f"{kind}: ", _BOLD, color=color)
                    + body
                )
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# ErrorReporter
# ---------------------------------------------------------------------------

class ErrorReporter:
    """
    Collects diagnostics for one expansion and formats them.

    Rust Pattern: rustc_errors::Emitter
    """

    def __init__(self, source_files: Dict[str, str]):
        self.source_files = source_files
        self.errors: List[Diagnostic] = []

    def report_error(
        self,
        message: str,
        location: Optional[SourceLocation],
        code: Optional[str] = None,
        help: Optional[str] = None,
        note: Optional[str] = None,
        label: Optional[str] = None,
    ) -> None:
        self.errors.append(Diagnostic(message, location, code, help, note, label))

    def report_exception(self, error: "ShadowgenError") -> None:
        self.report_error(
            error.message,
            error.location,
            code=error.error_code,
            help=error.help,
            label=error.label,
        )

    def has_errors(self) -> bool:
        return bool(self.errors)

    def format_error(self, error: Diagnostic, color: Optional[bool] = None) -> str:
        use_color = _use_color() if color is None else color
        return _render(error, self.source_files, use_color)

    def format_all_errors(self, color: Optional[bool] = None) -> str:
        use_color = _use_color() if color is None else color
        parts = [self.format_error(e, color=use_color) for e in self.errors]
        count = len(self.errors)
        summary = f"aborting due to {count} previous error{'s' if count != 1 else ''}"
        parts.append(
            _style("error", _BOLD, _RED, color=use_color)
            + _style(f": {summary}", _BOLD, color=use_color)
        )
        return "\n\n".join(parts) + "\n"


# ============================================================================
# Exception Classes
# ============================================================================

class ShadowgenError(Exception):
    """
    Base exception for every error caused by the input item.

    Subclasses pin the error code; `label` is the short text printed next to
    the carets and `help` an optional suggestion line.
    """
    error_code = "E0000"

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        help: Optional[str] = None,
        label: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.location = location
        self.help = help
        self.label = label

    def __str__(self) -> str:
        if self.location is not None:
            return f"error[{self.error_code}]: {self.message}\n --> {self.location}"
        return f"error[{self.error_code}]: {self.message}"


class ParseError(ShadowgenError):
    """The item text is not a parseable `impl` block."""
    error_code = "E0001"


class MalformedDirective(ShadowgenError):
    """Marker arguments use an unknown keyword or an unparseable list."""
    error_code = "E0101"


class UnsupportedSelfType(ShadowgenError):
    """The self type is not a plain path, so no shadow name can be derived."""
    error_code = "E0102"


class UnsupportedMethodForm(ShadowgenError):
    """The method marker was applied to something other than a method."""
    error_code = "E0103"


class ShadowgenImplementationError(Exception):
    """
    Error in shadowgen itself (not in the user's item).

    Never raise this for bad input - use a ShadowgenError subclass instead.
    """
    def __init__(self, message: str, error_code: str = "E9999"):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"
