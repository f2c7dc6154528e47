"""
Parser

Rust Pattern: syn::parse

One compiled LALR table serves every entry point: whole impl units,
single associated items (for the isolated method-marker check) and the
comma-separated lists found inside marker arguments.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple, Type

from lark import Lark
from lark.exceptions import (
    UnexpectedCharacters,
    UnexpectedEOF,
    UnexpectedInput,
    UnexpectedToken,
    VisitError,
)

from ..shared.errors import MalformedDirective, ParseError, ShadowgenError
from ..shared.nodes import ImplUnit, Meta, WherePredicate
from ..shared.source_location import SourceLocation, location_at
from ..utils.config import DEFAULT_PARSER_CACHE_FILE, DEFAULT_SOURCE_FILE
from .transformers.base import ShadowTransformer

logger = logging.getLogger("shadowgen.frontend.parser")

START_RULES = ("impl_unit", "assoc_item_entry", "meta_list", "ident_list", "predicate_list")


def mask_outside(source: str, start: int, end: int) -> str:
    """
    Blank everything outside source[start:end], keeping newlines.

    The result has the same length and line structure as `source`, so a
    region parsed from it reports offsets, lines and columns of the
    original text.
    """
    def blank(text: str) -> str:
        return "".join(ch if ch == "\n" else " " for ch in text)

    return blank(source[:start]) + source[start:end] + blank(source[end:])


class Parser:
    """
    Parser (Rust naming: syn::parse).

    Immutable after construction; one instance may be shared by any number
    of expansions.
    """

    def __init__(self, cache_file: str = DEFAULT_PARSER_CACHE_FILE):
        grammar_path = Path(__file__).parent / "grammar.lark"
        self.parser = Lark.open(
            grammar_path,
            start=list(START_RULES),
            parser='lalr',
            cache=cache_file,
            propagate_positions=True,
            maybe_placeholders=False,
        )

    def parse_impl(self, source: str, source_file: str = DEFAULT_SOURCE_FILE) -> ImplUnit:
        """Parse a whole `impl` block (outer attributes included)."""
        return self._parse(source, "impl_unit", source_file, ParseError,
                           "expected a single `impl` block")

    def parse_item(self, source: str, source_file: str = DEFAULT_SOURCE_FILE):
        """Parse one associated item: a method, const, type or macro invocation."""
        return self._parse(source, "assoc_item_entry", source_file, ParseError,
                           "expected a single associated item")

    def parse_meta_list(self, source: str, source_file: str = DEFAULT_SOURCE_FILE,
                        span: Optional[Tuple[int, int]] = None) -> Tuple[Meta, ...]:
        return self._parse_region(source, span, "meta_list", source_file,
                                  "marker arguments must be a comma-separated list")

    def parse_ident_list(self, source: str, source_file: str = DEFAULT_SOURCE_FILE,
                         span: Optional[Tuple[int, int]] = None) -> Tuple[str, ...]:
        return self._parse_region(source, span, "ident_list", source_file,
                                  "expected a comma-separated list of type parameter names")

    def parse_predicate_list(self, source: str, source_file: str = DEFAULT_SOURCE_FILE,
                             span: Optional[Tuple[int, int]] = None) -> Tuple[WherePredicate, ...]:
        return self._parse_region(source, span, "predicate_list", source_file,
                                  "expected a comma-separated list of where predicates")

    def _parse_region(self, source, span, start, source_file, help):
        text = source if span is None else mask_outside(source, *span)
        return self._parse(text, start, source_file, MalformedDirective, help)

    def _parse(self, text: str, start: str, source_file: str,
               error_cls: Type[ShadowgenError], help: str):
        logger.debug(f"parsing {source_file} from rule '{start}'")
        try:
            tree = self.parser.parse(text, start=start)
        except UnexpectedInput as e:
            raise error_cls(
                self._describe(e, start),
                self._error_location(e, text, source_file),
                help=help,
            ) from e
        try:
            return ShadowTransformer(text, source_file).transform(tree)
        except VisitError as e:
            raise e.orig_exc from e

    @staticmethod
    def _describe(error: UnexpectedInput, start: str) -> str:
        what = "marker arguments" if start.endswith("_list") else "Rust item"
        if isinstance(error, UnexpectedEOF):
            return f"unexpected end of input while parsing {what}"
        if isinstance(error, UnexpectedToken):
            if error.token.type == "$END":
                return f"unexpected end of input while parsing {what}"
            return f"unexpected token `{error.token}` while parsing {what}"
        if isinstance(error, UnexpectedCharacters):
            return f"unexpected character `{error.char}` while parsing {what}"
        return f"could not parse {what}"

    @staticmethod
    def _error_location(error: UnexpectedInput, text: str, source_file: str) -> SourceLocation:
        pos = getattr(error, "pos_in_stream", None)
        if isinstance(error, UnexpectedToken) and error.token.type == "$END":
            pos = None
        if pos is None or pos < 0:
            pos = len(text.rstrip())
        return location_at(text, pos, source_file)
