"""
Directive parsing.

Marker arguments are a comma-separated list of metas. Each meta must be
one of the keyword forms:

    transform_bounds(T, U)         project T and U onto their shadow forms
    add_bounds(T: Debug, U: Eq)    append literal where predicates

Anything else is a MalformedDirective.
"""

import logging
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from ..shared.errors import MalformedDirective
from ..shared.nodes import (
    ImplUnit, MetaForm, Path, PathSegment, TraitBound, TypePredicate, WherePredicate,
    ident_type,
)
from ..utils.config import (
    ADD_BOUNDS_ALIAS, ADD_BOUNDS_KEYWORD, SHADOW_CAPABILITY_TRAIT, TRANSFORM_BOUNDS_KEYWORD,
)
from .base import BasePass, ExpansionContext

logger = logging.getLogger(__name__)


class DirectiveKeyword(Enum):
    """Closed set of directive keywords accepted inside a marker."""
    TRANSFORM_BOUNDS = TRANSFORM_BOUNDS_KEYWORD
    ADD_BOUNDS = ADD_BOUNDS_KEYWORD

    @classmethod
    def from_path(cls, path: str) -> Optional["DirectiveKeyword"]:
        if path == ADD_BOUNDS_ALIAS:
            return cls.ADD_BOUNDS
        for keyword in cls:
            if keyword.value == path:
                return keyword
        return None


def is_marker(attr, name: str) -> bool:
    """True if `attr` is the marker `name`, bare or path-qualified (`#[shadowgen::name]`)."""
    if attr.meta is None:
        return False
    path = attr.meta.path
    return path == name or path.endswith(f"::{name}")


def baseline_predicate(ident: str) -> TypePredicate:
    """`T: Shadow` for a projected parameter T."""
    capability = TraitBound(Path((PathSegment(SHADOW_CAPABILITY_TRAIT),)))
    return TypePredicate(ident_type(ident), (capability,))


class TransformDirective:
    """
    Parsed marker arguments for one scope (the unit, or one method).

    Projected parameters are kept in first-mention order with repeats
    collapsed; literal predicates are kept in order with repeats intact.
    """

    def __init__(self, projected: Iterable[str] = (), literal_predicates: Iterable[WherePredicate] = ()):
        self._projected: Dict[str, None] = {}
        self.literal_predicates: List[WherePredicate] = []
        for ident in projected:
            self.project(ident)
        for predicate in literal_predicates:
            self.add_literal(predicate)

    @property
    def projected(self) -> Tuple[str, ...]:
        return tuple(self._projected)

    def project(self, ident: str) -> None:
        self._projected.setdefault(ident, None)

    def projects(self, ident: str) -> bool:
        return ident in self._projected

    def add_literal(self, predicate: WherePredicate) -> None:
        self.literal_predicates.append(predicate)

    def merge(self, other: "TransformDirective") -> None:
        for ident in other.projected:
            self.project(ident)
        self.literal_predicates.extend(other.literal_predicates)

    def is_empty(self) -> bool:
        return not self._projected and not self.literal_predicates

    def baseline_predicates(self) -> Tuple[TypePredicate, ...]:
        return tuple(baseline_predicate(ident) for ident in self._projected)

    def finalize(self) -> Tuple[WherePredicate, ...]:
        """Baseline `T: Shadow` predicates, then the literal predicates."""
        return self.baseline_predicates() + tuple(self.literal_predicates)

    def __repr__(self) -> str:
        return (f"TransformDirective(projected={list(self._projected)!r}, "
                f"literal_predicates={self.literal_predicates!r})")


def parse_directive(parser, source: str, source_file: str,
                    span: Optional[Tuple[int, int]] = None) -> TransformDirective:
    """
    Parse marker argument text into a TransformDirective.

    `span` limits parsing to a region of `source` (the inside of a marker's
    parentheses) while keeping diagnostics pointed at the full text.
    """
    directive = TransformDirective()
    for meta in parser.parse_meta_list(source, source_file, span):
        keyword = DirectiveKeyword.from_path(meta.path)
        if keyword is None:
            raise MalformedDirective(
                f"unknown directive `{meta.path}`",
                meta.location,
                help=f"expected `{TRANSFORM_BOUNDS_KEYWORD}(...)` or `{ADD_BOUNDS_KEYWORD}(...)`",
                label="unknown directive",
            )
        if meta.form is not MetaForm.LIST:
            raise MalformedDirective(
                f"`{meta.path}` expects a parenthesized list",
                meta.location,
                help=f"write `{meta.path}(...)`",
            )
        if keyword is DirectiveKeyword.TRANSFORM_BOUNDS:
            for ident in parser.parse_ident_list(source, source_file, meta.args_span):
                directive.project(ident)
        else:
            for predicate in parser.parse_predicate_list(source, source_file, meta.args_span):
                directive.add_literal(predicate)
    return directive


class DirectiveParsingPass(BasePass):
    """Parse the unit marker's arguments into the unit-scope directive."""
    requires = []

    def run(self, unit: ImplUnit, ctx: ExpansionContext) -> ImplUnit:
        directive = parse_directive(ctx.parser, ctx.args_source, ctx.args_file, ctx.args_span)
        logger.debug(f"unit directive: {directive!r}")
        ctx.unit_directive = directive
        ctx.set_analysis(DirectiveParsingPass, directive)
        return unit
