"""
Self-type rewriting: `Foo<T>` -> `ShadowFoo<T>`.
"""

import logging
from dataclasses import replace
from typing import Optional

from ..frontend.printer import print_type
from ..shared.errors import UnsupportedSelfType
from ..shared.nodes import ImplUnit, PathType, Type
from ..shared.source_location import SourceLocation
from ..utils.config import SHADOW_TYPE_PREFIX
from .base import BasePass, ExpansionContext

logger = logging.getLogger(__name__)


def shadow_type_of(ty: Type, location: Optional[SourceLocation] = None) -> PathType:
    """
    Shadow form of a self type.

    Only plain paths have a name to derive from: the last segment's ident
    gets the shadow prefix, every other segment and the last segment's
    generic arguments are kept.
    """
    if not isinstance(ty, PathType) or ty.qself is not None or not ty.path.segments:
        raise UnsupportedSelfType(
            f"unsupported self type `{print_type(ty)}`",
            location,
            help="the shadow type is derived from a named type such as `Foo` or `Foo<T>`",
            label="expected a path type",
        )
    *leading, last = ty.path.segments
    shadowed = replace(last, ident=f"{SHADOW_TYPE_PREFIX}{last.ident}")
    return replace(ty, path=replace(ty.path, segments=tuple(leading) + (shadowed,)))


class SelfTypeRewritePass(BasePass):
    """Swap the generated unit's self type for its shadow type."""
    requires = []

    def run(self, unit: ImplUnit, ctx: ExpansionContext) -> ImplUnit:
        shadow = shadow_type_of(unit.self_ty, unit.self_location)
        logger.debug(f"self type {print_type(unit.self_ty)} -> {print_type(shadow)}")
        return replace(unit, self_ty=shadow)
