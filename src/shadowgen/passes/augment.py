"""
Bound augmentation: append the directive's own predicates.
"""

import logging
from dataclasses import replace

from ..shared.nodes import Generics, ImplUnit, WhereClause
from .base import BasePass, ExpansionContext
from .transform import TransformBoundsPass

logger = logging.getLogger(__name__)


def augment_generics(generics: Generics, directive) -> Generics:
    """
    Append `directive.finalize()` (baselines, then literals) to the where clause.

    A where clause is created when there was none and the directive adds
    something; when there is nothing at all, no where clause is attached.
    """
    predicates = generics.predicates + directive.finalize()
    if not predicates:
        return replace(generics, where_clause=None)
    return replace(generics, where_clause=WhereClause(predicates))


class AugmentBoundsPass(BasePass):
    """Add the unit directive's baseline and literal predicates to the unit."""
    requires = [TransformBoundsPass]

    def run(self, unit: ImplUnit, ctx: ExpansionContext) -> ImplUnit:
        generics = augment_generics(unit.generics, ctx.unit_directive)
        logger.debug(f"unit carries {len(generics.predicates)} predicate(s)")
        return replace(unit, generics=generics)
