"""
Parse tree -> syntax nodes.

Structural rules (types, bounds, generics, predicates) become frozen nodes
from `shadowgen.shared.nodes`. Rules whose text is carried over unchanged
(token trees, method heads and bodies, associated items) become `Spanned`
source slices taken from the text being parsed.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, NamedTuple, Optional, Tuple, Union

from lark import Transformer, v_args
from lark.lexer import Token
from typing_extensions import TypeAlias

from ...shared.errors import ShadowgenImplementationError
from ...shared.nodes import (
    AngleArgs, ArrayType, AssocBinding, AssocConstraint, AttrStyle, Attribute,
    BareFnArg, BareFnType, ConstArg, ConstParam, DynTraitType, Generics,
    ImplTraitType, ImplUnit, ItemKind, Lifetime, LifetimeParam,
    LifetimePredicate, Meta, MetaForm, Method, NeverType, ParenArgs, ParenType,
    Path, PathSegment, PathType, PtrType, QSelf, RefType, SliceType,
    TraitBound, TupleType, TypeParam, TypePredicate, VerbatimItem, WhereClause,
)
from ...shared.source_location import SourceLocation

LarkMeta: TypeAlias = Any

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Spanned:
    """Source slice of a parse-tree node, with the node built for it (if any)."""
    text: str
    start: int
    end: int
    location: Optional[SourceLocation]
    node: Any = None


class Delimited(Spanned):
    """`( ... )`, `[ ... ]` or `{ ... }` token tree."""

    @property
    def inner(self) -> str:
        return self.text[1:-1]

    @property
    def inner_span(self) -> Tuple[int, int]:
        return self.start + 1, self.end - 1


class ReturnType(Spanned):
    """`-> Type`; `node` is the parsed type."""


@dataclass(frozen=True)
class ForBinder:
    """`for<'a, 'b>` higher-ranked binder."""
    lifetimes: Tuple[Lifetime, ...]


@dataclass(frozen=True)
class FnAbi:
    name: str  # "" for a bare `extern`


class ImplBody(NamedTuple):
    inner_attrs: Tuple[Attribute, ...]
    items: Tuple[Union[Method, VerbatimItem], ...]


def _build_path(pieces, leading_colon: bool = False) -> Path:
    """Fold path pieces into a Path, attaching turbofish args to the previous segment."""
    segments = []
    for piece in pieces:
        if isinstance(piece, AngleArgs):
            if not segments:
                raise ShadowgenImplementationError("turbofish arguments without a segment")
            segments[-1] = replace(segments[-1], arguments=replace(piece, turbofish=True))
        else:
            segments.append(piece)
    return Path(tuple(segments), leading_colon=leading_colon)


@v_args(inline=True, meta=True)
class ShadowTransformer(Transformer):
    """
    Transformer for `grammar.lark`.

    One instance per parsed text: the instance holds the text so verbatim
    slices and locations can be cut out of it.
    """

    def __init__(self, source: str, source_file: str) -> None:
        super().__init__()
        self.source = source
        self.source_file = source_file

    def __default__(self, data, children, meta):
        raise ShadowgenImplementationError(
            f"Missing transformer method for grammar rule '{data}'"
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _extract_location(self, meta: LarkMeta) -> Optional[SourceLocation]:
        """Extract location from Lark meta object"""
        if meta is None or getattr(meta, "empty", True):
            return None
        return SourceLocation(
            file=self.source_file,
            line=meta.line,
            column=meta.column,
            start=meta.start_pos,
            end=meta.end_pos,
            end_line=meta.end_line,
            end_column=meta.end_column,
        )

    def _span(self, meta: LarkMeta, cls=Spanned, node: Any = None) -> Spanned:
        location = self._extract_location(meta)
        if location is None:
            raise ShadowgenImplementationError("source slice requested for an empty rule")
        text = self.source[location.start:location.end]
        return cls(text, location.start, location.end, location, node)

    def _text(self, meta: LarkMeta) -> str:
        return self._span(meta).text

    # =========================================================================
    # Entry points
    # =========================================================================

    def impl_unit(self, meta: LarkMeta, attrs, unit: ImplUnit) -> ImplUnit:
        location = self._extract_location(meta)
        logger.debug(f"parsed impl unit with {len(unit.items)} item(s) at {location}")
        return replace(unit, attrs=attrs, text=self._text(meta), location=location)

    def assoc_item_entry(self, meta: LarkMeta, item):
        return item

    def meta_list(self, meta: LarkMeta, *metas: Meta) -> Tuple[Meta, ...]:
        return metas

    def ident_list(self, meta: LarkMeta, *idents: Token) -> Tuple[str, ...]:
        return tuple(str(ident) for ident in idents)

    def predicate_list(self, meta: LarkMeta, *predicates):
        return predicates

    # =========================================================================
    # Attributes
    # =========================================================================

    def attrs(self, meta: LarkMeta, *attrs: Attribute) -> Tuple[Attribute, ...]:
        return attrs

    def outer_attr(self, meta: LarkMeta, item: Meta) -> Attribute:
        return Attribute(AttrStyle.OUTER, item, self._text(meta), self._extract_location(meta))

    def inner_attr(self, meta: LarkMeta, item: Meta) -> Attribute:
        return Attribute(AttrStyle.INNER, item, self._text(meta), self._extract_location(meta))

    def doc_attr(self, meta: LarkMeta, comment: Token) -> Attribute:
        return Attribute(AttrStyle.DOC, None, str(comment), self._extract_location(meta))

    def inner_doc_attr(self, meta: LarkMeta, comment: Token) -> Attribute:
        return Attribute(AttrStyle.INNER, None, str(comment), self._extract_location(meta))

    def meta(self, meta: LarkMeta, path: str, value: Optional[Spanned] = None) -> Meta:
        location = self._extract_location(meta)
        if value is None:
            return Meta(path, MetaForm.PATH, location=location)
        if isinstance(value, Delimited):
            return Meta(path, MetaForm.LIST, value.inner, value.inner_span, location)
        return Meta(path, MetaForm.NAME_VALUE, location=location)

    def meta_path(self, meta: LarkMeta, *idents: Token) -> str:
        return "".join(self._text(meta).split())

    def meta_value(self, meta: LarkMeta, *tokens) -> Spanned:
        return self._span(meta)

    # =========================================================================
    # impl block
    # =========================================================================

    def impl_block(self, meta: LarkMeta, *children) -> ImplUnit:
        unsafe = False
        generics = Generics()
        header: Optional[Spanned] = None
        self_spanned: Optional[Spanned] = None
        where_clause: Optional[WhereClause] = None
        body = ImplBody((), ())
        for child in children:
            if isinstance(child, Token):
                unsafe = True
            elif isinstance(child, Generics):
                generics = child
            elif isinstance(child, WhereClause):
                where_clause = child
            elif isinstance(child, ImplBody):
                body = child
            elif header is None:
                header = child
            else:
                self_spanned = child
        trait_ref = None
        if self_spanned is None:
            self_spanned = header
        else:
            trait_ref = header.text
        return ImplUnit(
            attrs=(),
            unsafe=unsafe,
            generics=replace(generics, where_clause=where_clause),
            trait_ref=trait_ref,
            self_ty=self_spanned.node,
            self_location=self_spanned.location,
            inner_attrs=body.inner_attrs,
            items=body.items,
            text=self._text(meta),
            location=self._extract_location(meta),
        )

    def header_type(self, meta: LarkMeta, ty) -> Spanned:
        return self._span(meta, node=ty)

    def for_type(self, meta: LarkMeta, ty) -> Spanned:
        return self._span(meta, node=ty)

    def impl_for(self, meta: LarkMeta, self_ty: Spanned) -> Spanned:
        return self_ty

    def impl_body(self, meta: LarkMeta, *children) -> ImplBody:
        inner = tuple(c for c in children if isinstance(c, Attribute))
        items = tuple(c for c in children if not isinstance(c, Attribute))
        return ImplBody(inner, items)

    def assoc_item(self, meta: LarkMeta, attrs, item):
        return replace(item, attrs=attrs)

    def method(self, meta: LarkMeta, head: Spanned, *rest) -> Method:
        generics = Generics()
        params = ret = body = None
        where_clause = None
        for child in rest:
            if isinstance(child, Generics):
                generics = child
            elif isinstance(child, WhereClause):
                where_clause = child
            elif isinstance(child, ReturnType):
                ret = child.text
            elif isinstance(child, Delimited):
                params = child.text
            else:
                body = child.text
        return Method(
            name=head.node,
            attrs=(),
            head=head.text,
            generics=replace(generics, where_clause=where_clause),
            params=params,
            ret=ret,
            body=body,
            location=self._extract_location(meta),
        )

    def fn_head(self, meta: LarkMeta, *children) -> Spanned:
        name = [c for c in children if isinstance(c, Token)][-1]
        return self._span(meta, node=str(name))

    def visibility(self, meta: LarkMeta, *children) -> None:
        return None

    def fn_qualifier(self, meta: LarkMeta, *children) -> None:
        return None

    def fn_body(self, meta: LarkMeta, *children) -> Spanned:
        return self._span(meta)

    def return_type(self, meta: LarkMeta, ty) -> ReturnType:
        return self._span(meta, cls=ReturnType, node=ty)

    def assoc_const(self, meta: LarkMeta, *children) -> VerbatimItem:
        return VerbatimItem(ItemKind.CONST, (), self._text(meta), self._extract_location(meta))

    def assoc_type(self, meta: LarkMeta, *children) -> VerbatimItem:
        return VerbatimItem(ItemKind.TYPE, (), self._text(meta), self._extract_location(meta))

    def assoc_macro(self, meta: LarkMeta, *children) -> VerbatimItem:
        return VerbatimItem(ItemKind.MACRO, (), self._text(meta), self._extract_location(meta))

    # =========================================================================
    # Generics and where clauses
    # =========================================================================

    def generic_params(self, meta: LarkMeta, *params) -> Generics:
        return Generics(params)

    def type_param(self, meta: LarkMeta, ident: Token, *rest) -> TypeParam:
        bounds = ()
        default = None
        for child in rest:
            if isinstance(child, tuple):
                bounds = child
            else:
                default = child
        return TypeParam(str(ident), bounds, default)

    def lifetime_param(self, meta: LarkMeta, lifetime: Token, bounds=()) -> LifetimeParam:
        return LifetimeParam(Lifetime(str(lifetime)), bounds)

    def const_param(self, meta: LarkMeta, ident: Token, ty, default=None) -> ConstParam:
        return ConstParam(str(ident), ty, default)

    def const_default(self, meta: LarkMeta, value):
        return value

    def lifetime_bounds(self, meta: LarkMeta, *lifetimes: Token) -> Tuple[Lifetime, ...]:
        return tuple(Lifetime(str(lt)) for lt in lifetimes)

    def where_clause(self, meta: LarkMeta, *predicates) -> WhereClause:
        return WhereClause(predicates)

    def type_predicate(self, meta: LarkMeta, *children) -> TypePredicate:
        lifetimes = ()
        if isinstance(children[0], ForBinder):
            lifetimes = children[0].lifetimes
            children = children[1:]
        bounds = children[1] if len(children) > 1 else ()
        return TypePredicate(children[0], bounds, lifetimes)

    def lifetime_predicate(self, meta: LarkMeta, lifetime: Token, bounds=()) -> LifetimePredicate:
        return LifetimePredicate(Lifetime(str(lifetime)), bounds)

    def for_lifetimes(self, meta: LarkMeta, *lifetimes: Token) -> ForBinder:
        return ForBinder(tuple(Lifetime(str(lt)) for lt in lifetimes))

    def bounds(self, meta: LarkMeta, *bounds) -> tuple:
        return bounds

    def trait_bound(self, meta: LarkMeta, *children) -> TraitBound:
        maybe = False
        lifetimes = ()
        for child in children[:-1]:
            if isinstance(child, ForBinder):
                lifetimes = child.lifetimes
            else:
                maybe = True
        return TraitBound(children[-1], maybe, lifetimes)

    def lifetime_bound(self, meta: LarkMeta, lifetime: Token) -> Lifetime:
        return Lifetime(str(lifetime))

    # =========================================================================
    # Paths
    # =========================================================================

    def path_type(self, meta: LarkMeta, path: Path) -> PathType:
        return PathType(path)

    def qualified_path_type(self, meta: LarkMeta, ty, *rest) -> PathType:
        as_trait = None
        if rest and isinstance(rest[0], Path):
            as_trait, rest = rest[0], rest[1:]
        return PathType(_build_path(rest), QSelf(ty, as_trait))

    def qself_as(self, meta: LarkMeta, path: Path) -> Path:
        return path

    def path(self, meta: LarkMeta, *children) -> Path:
        leading = bool(children) and isinstance(children[0], Token)
        pieces = children[1:] if leading else children
        return _build_path(pieces, leading_colon=leading)

    def path_segment(self, meta: LarkMeta, ident: Token, args=None) -> PathSegment:
        return PathSegment(str(ident), args)

    def sugar_segment(self, meta: LarkMeta, ident: Token, args: ParenArgs) -> PathSegment:
        return PathSegment(str(ident), args)

    def fn_sugar_args(self, meta: LarkMeta, *children) -> ParenArgs:
        output = None
        if children and isinstance(children[-1], ReturnType):
            output = children[-1].node
            children = children[:-1]
        return ParenArgs(children, output)

    def generic_args(self, meta: LarkMeta, *args) -> AngleArgs:
        return AngleArgs(args)

    def lifetime_arg(self, meta: LarkMeta, lifetime: Token) -> Lifetime:
        return Lifetime(str(lifetime))

    def assoc_binding(self, meta: LarkMeta, ident: Token, ty) -> AssocBinding:
        return AssocBinding(str(ident), ty)

    def assoc_constraint(self, meta: LarkMeta, ident: Token, bounds: tuple) -> AssocConstraint:
        return AssocConstraint(str(ident), bounds)

    def const_arg(self, meta: LarkMeta, *children) -> ConstArg:
        return ConstArg(self._text(meta))

    # =========================================================================
    # Types
    # =========================================================================

    def ref_type(self, meta: LarkMeta, *children) -> RefType:
        lifetime = None
        mutable = False
        for child in children[:-1]:
            if child.type == "LIFETIME":
                lifetime = Lifetime(str(child))
            else:
                mutable = True
        return RefType(lifetime, mutable, children[-1])

    def ptr_type(self, meta: LarkMeta, qualifier: Token, ty) -> PtrType:
        return PtrType(qualifier.type == "MUT", ty)

    def unit_type(self, meta: LarkMeta) -> TupleType:
        return TupleType(())

    def paren_type(self, meta: LarkMeta, ty) -> ParenType:
        return ParenType(ty)

    def tuple_type(self, meta: LarkMeta, *elems) -> TupleType:
        return TupleType(elems)

    def slice_type(self, meta: LarkMeta, ty) -> SliceType:
        return SliceType(ty)

    def array_type(self, meta: LarkMeta, ty, length: str) -> ArrayType:
        return ArrayType(ty, length)

    def array_len(self, meta: LarkMeta, *children) -> str:
        return self._text(meta).strip()

    def never_type(self, meta: LarkMeta) -> NeverType:
        return NeverType()

    def impl_trait_type(self, meta: LarkMeta, bounds: tuple) -> ImplTraitType:
        return ImplTraitType(bounds)

    def dyn_trait_type(self, meta: LarkMeta, bounds: tuple) -> DynTraitType:
        return DynTraitType(bounds)

    def fn_ptr_type(self, meta: LarkMeta, *children) -> BareFnType:
        lifetimes = ()
        unsafe = False
        abi = None
        inputs = ()
        output = None
        for child in children:
            if isinstance(child, ForBinder):
                lifetimes = child.lifetimes
            elif isinstance(child, Token):
                unsafe = True
            elif isinstance(child, FnAbi):
                abi = child.name
            elif isinstance(child, ReturnType):
                output = child.node
            else:
                inputs = child
        return BareFnType(lifetimes, unsafe, abi, inputs, output)

    def fn_abi(self, meta: LarkMeta, name: Optional[Token] = None) -> FnAbi:
        return FnAbi(str(name) if name is not None else "")

    def fn_ptr_args(self, meta: LarkMeta, *args: BareFnArg) -> Tuple[BareFnArg, ...]:
        return args

    def fn_ptr_arg(self, meta: LarkMeta, *children) -> BareFnArg:
        if len(children) == 2:
            return BareFnArg(str(children[0]), children[1])
        return BareFnArg(None, children[0])

    # =========================================================================
    # Token trees
    # =========================================================================

    def delim_paren(self, meta: LarkMeta, *tokens) -> Delimited:
        return self._span(meta, cls=Delimited)

    def delim_bracket(self, meta: LarkMeta, *tokens) -> Delimited:
        return self._span(meta, cls=Delimited)

    def delim_brace(self, meta: LarkMeta, *tokens) -> Delimited:
        return self._span(meta, cls=Delimited)
