"""
Generic-list normalization.

Inline bounds move into the where clause:

    impl<'a: 'b, T: Clone + 'a, const N: usize> ...
    =>
    impl<'a, T, const N: usize> ... where 'a: 'b, T: Clone + 'a

so every later pass only has to look at predicates.
"""

import logging
from dataclasses import replace

from ..shared.nodes import (
    Generics, ImplUnit, LifetimeParam, LifetimePredicate, TypeParam, TypePredicate,
    WhereClause, ident_type,
)
from .base import BasePass, ExpansionContext
from .directives import DirectiveParsingPass

logger = logging.getLogger(__name__)


def normalize_generics(generics: Generics) -> Generics:
    """
    Move inline bounds of type and lifetime parameters into predicates.

    Moved predicates are appended after the existing ones in parameter
    order. Const parameters and unbounded parameters are left alone, and a
    normalized list is returned unchanged.
    """
    params = []
    moved = []
    for param in generics.params:
        if isinstance(param, TypeParam) and param.bounds:
            moved.append(TypePredicate(ident_type(param.ident), param.bounds))
            param = replace(param, bounds=())
        elif isinstance(param, LifetimeParam) and param.bounds:
            moved.append(LifetimePredicate(param.lifetime, param.bounds))
            param = replace(param, bounds=())
        params.append(param)

    if not moved:
        return generics
    where_clause = WhereClause(generics.predicates + tuple(moved))
    return Generics(tuple(params), where_clause)


class NormalizeGenericsPass(BasePass):
    """Normalize the unit's own generic list."""
    requires = [DirectiveParsingPass]

    def run(self, unit: ImplUnit, ctx: ExpansionContext) -> ImplUnit:
        generics = normalize_generics(unit.generics)
        if generics is not unit.generics:
            logger.debug(f"moved inline bounds into {len(generics.predicates)} predicate(s)")
        return replace(unit, generics=generics)
