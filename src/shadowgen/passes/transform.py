"""
Bound transformation: rewrite projected parameters to their shadow form.

For a projected parameter `T`, every root occurrence of `T` in a where
predicate becomes `T::Shadowed`:

    T: Clone                  ->  T::Shadowed: Clone
    <T as Tr>::Out: Debug     ->  <T::Shadowed as Tr>::Out: Debug
    &'a T: IntoIterator       ->  &'a T::Shadowed: IntoIterator
    S: Sum<T>                 ->  S: Sum<T::Shadowed>
    F: Fn(T) -> T             ->  F: Fn(T::Shadowed) -> T::Shadowed

A root occurrence is a bare `T` reached without entering another path
type's generic arguments, so `Vec<T>: Debug`, `S: Sum<Vec<T>>` and
`T::Item: Eq` are left alone. Lifetime predicates never change.
"""

import logging
from dataclasses import replace
from typing import Callable, Dict, Iterable, Tuple

from ..shared.errors import ShadowgenImplementationError
from ..shared.nodes import (
    AngleArgs, ArrayType, AssocBinding, AssocConstraint, BareFnType, DynTraitType,
    Generics, ImplTraitType, ImplUnit, Lifetime, LifetimePredicate, NeverType,
    ParenArgs, ParenType, Path, PathSegment, PathType, PtrType, RefType, SliceType,
    TupleType, TypePredicate, WhereClause, WherePredicate,
)
from ..utils.config import SHADOW_PROJECTION_MEMBER
from .base import BasePass, ExpansionContext
from .normalize import NormalizeGenericsPass

logger = logging.getLogger(__name__)


def project_type(ident: str) -> PathType:
    """Projection expression for a parameter: `T` -> `T::Shadowed`."""
    return PathType(Path((PathSegment(ident), PathSegment(SHADOW_PROJECTION_MEMBER))))


class BoundRewriter:
    """
    Immutable rewrite of root occurrences of projected parameters.

    Nodes are never mutated; every rewrite builds new ones.
    """

    def __init__(self, projected: Iterable[str]):
        self.projected = frozenset(projected)
        self._type_dispatch: Dict[type, Callable] = {
            PathType: self._rewrite_path_type,
            RefType: lambda ty: replace(ty, elem=self.rewrite_type(ty.elem)),
            PtrType: lambda ty: replace(ty, elem=self.rewrite_type(ty.elem)),
            SliceType: lambda ty: replace(ty, elem=self.rewrite_type(ty.elem)),
            ArrayType: lambda ty: replace(ty, elem=self.rewrite_type(ty.elem)),
            ParenType: lambda ty: replace(ty, elem=self.rewrite_type(ty.elem)),
            TupleType: lambda ty: replace(ty, elems=self._types(ty.elems)),
            ImplTraitType: lambda ty: replace(ty, bounds=self.rewrite_bounds(ty.bounds)),
            DynTraitType: lambda ty: replace(ty, bounds=self.rewrite_bounds(ty.bounds)),
            BareFnType: self._rewrite_bare_fn,
            NeverType: lambda ty: ty,
        }

    def rewrite_type(self, ty):
        handler = self._type_dispatch.get(type(ty))
        if handler is None:
            raise ShadowgenImplementationError(f"no rewrite rule for type node {type(ty).__name__}")
        return handler(ty)

    def _types(self, types) -> tuple:
        return tuple(self.rewrite_type(t) for t in types)

    def _rewrite_path_type(self, ty: PathType):
        if ty.qself is not None:
            return replace(ty, qself=replace(ty.qself, ty=self.rewrite_type(ty.qself.ty)))
        ident = ty.path.get_ident()
        if ident is not None and ident in self.projected:
            return project_type(ident)
        return ty

    def _rewrite_bare_fn(self, ty: BareFnType) -> BareFnType:
        inputs = tuple(replace(arg, ty=self.rewrite_type(arg.ty)) for arg in ty.inputs)
        output = self.rewrite_type(ty.output) if ty.output is not None else None
        return replace(ty, inputs=inputs, output=output)

    # -------------------------------------------------------------------------
    # Bounds: the trait's own arguments count as root positions
    # -------------------------------------------------------------------------

    def rewrite_bounds(self, bounds) -> tuple:
        return tuple(self.rewrite_bound(b) for b in bounds)

    def rewrite_bound(self, bound):
        if isinstance(bound, Lifetime):
            return bound
        segments = tuple(self._rewrite_segment_args(s) for s in bound.path.segments)
        return replace(bound, path=replace(bound.path, segments=segments))

    def _rewrite_segment_args(self, segment: PathSegment) -> PathSegment:
        args = segment.arguments
        if isinstance(args, AngleArgs):
            args = replace(args, args=tuple(self._rewrite_generic_arg(a) for a in args.args))
        elif isinstance(args, ParenArgs):
            output = self.rewrite_type(args.output) if args.output is not None else None
            args = ParenArgs(self._types(args.inputs), output)
        return replace(segment, arguments=args)

    def _rewrite_generic_arg(self, arg):
        if isinstance(arg, AssocBinding):
            return replace(arg, ty=self.rewrite_type(arg.ty))
        if isinstance(arg, AssocConstraint):
            return replace(arg, bounds=self.rewrite_bounds(arg.bounds))
        if type(arg) in self._type_dispatch:
            return self.rewrite_type(arg)
        return arg

    # -------------------------------------------------------------------------
    # Predicates
    # -------------------------------------------------------------------------

    def rewrite_predicate(self, predicate: WherePredicate) -> WherePredicate:
        if isinstance(predicate, LifetimePredicate):
            return predicate
        if isinstance(predicate, TypePredicate):
            return replace(
                predicate,
                bounded_ty=self.rewrite_type(predicate.bounded_ty),
                bounds=self.rewrite_bounds(predicate.bounds),
            )
        raise ShadowgenImplementationError(f"not a where predicate: {predicate!r}")


def transform_predicates(predicates: Iterable[WherePredicate],
                         projected: Iterable[str]) -> Tuple[WherePredicate, ...]:
    """Rewrite root occurrences of `projected` parameters in each predicate."""
    rewriter = BoundRewriter(projected)
    return tuple(rewriter.rewrite_predicate(p) for p in predicates)


def transform_generics(generics: Generics, directive) -> Generics:
    """Apply `transform_predicates` to a generic list's where clause, if any."""
    if generics.where_clause is None or not directive.projected:
        return generics
    predicates = transform_predicates(generics.predicates, directive.projected)
    return replace(generics, where_clause=WhereClause(predicates))


class TransformBoundsPass(BasePass):
    """Rewrite the unit's predicates for the unit directive's projected parameters."""
    requires = [NormalizeGenericsPass]

    def run(self, unit: ImplUnit, ctx: ExpansionContext) -> ImplUnit:
        directive = ctx.unit_directive
        logger.debug(f"projecting {list(directive.projected)} in {len(unit.generics.predicates)} predicate(s)")
        return replace(unit, generics=transform_generics(unit.generics, directive))
