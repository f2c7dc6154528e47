"""
Syntax Nodes

Rust Pattern: syn::{Type, Path, Generics, WherePredicate, ItemImpl}

Syntax tree for the part of an `impl` block the expander reasons about:
types, paths, bounds, generic parameters and where clauses are structural;
method bodies, parameter lists and non-method items are kept as source text.

All nodes are frozen dataclasses holding tuples, so they are hashable and
compare structurally. Nodes that only describe syntax (types, bounds,
predicates) carry no location, which lets predicate lists be compared as
sets regardless of where they were parsed from.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union
from typing_extensions import TypeAlias

from .source_location import SourceLocation


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Lifetime:
    """Lifetime such as `'a` (name includes the apostrophe)."""
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class AngleArgs:
    """
    Angle-bracketed arguments: `<T, 'a, Item = U, N>`.

    Rust Pattern: syn::AngleBracketedGenericArguments
    """
    args: Tuple[GenericArg, ...] = ()
    turbofish: bool = False


@dataclass(frozen=True)
class ParenArgs:
    """
    Parenthesized `Fn` sugar: `(A, B) -> C`.

    Rust Pattern: syn::ParenthesizedGenericArguments
    """
    inputs: Tuple[Type, ...] = ()
    output: Optional[Type] = None


@dataclass(frozen=True)
class PathSegment:
    ident: str
    arguments: Optional[PathArguments] = None


@dataclass(frozen=True)
class Path:
    """
    Rust Pattern: syn::Path
    """
    segments: Tuple[PathSegment, ...]
    leading_colon: bool = False

    def is_ident(self, ident: Optional[str] = None) -> bool:
        """True for a bare single-segment path without arguments (`T`)."""
        if self.leading_colon or len(self.segments) != 1:
            return False
        segment = self.segments[0]
        if segment.arguments is not None:
            return False
        return ident is None or segment.ident == ident

    def get_ident(self) -> Optional[str]:
        return self.segments[0].ident if self.is_ident() else None


@dataclass(frozen=True)
class AssocBinding:
    """Associated type binding inside angle arguments: `Item = T`."""
    ident: str
    ty: Type


@dataclass(frozen=True)
class AssocConstraint:
    """Associated type constraint inside angle arguments: `Item: Clone`."""
    ident: str
    bounds: Tuple[Bound, ...]


@dataclass(frozen=True)
class ConstArg:
    """Const generic argument kept as its source text (`3`, `{ N + 1 }`)."""
    text: str


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class QSelf:
    """
    Qualified self of a path type: the `<T as Trait>` in `<T as Trait>::Out`.

    Rust Pattern: syn::QSelf
    """
    ty: Type
    as_trait: Optional[Path] = None


@dataclass(frozen=True)
class PathType:
    """
    Rust Pattern: syn::TypePath

    With a qualified self, `path` holds only the segments after `>::`.
    """
    path: Path
    qself: Optional[QSelf] = None


@dataclass(frozen=True)
class RefType:
    lifetime: Optional[Lifetime]
    mutable: bool
    elem: Type


@dataclass(frozen=True)
class PtrType:
    mutable: bool
    elem: Type


@dataclass(frozen=True)
class TupleType:
    """Tuple type; the unit type `()` is the empty tuple."""
    elems: Tuple[Type, ...] = ()


@dataclass(frozen=True)
class ParenType:
    elem: Type


@dataclass(frozen=True)
class SliceType:
    elem: Type


@dataclass(frozen=True)
class ArrayType:
    elem: Type
    length: str


@dataclass(frozen=True)
class NeverType:
    pass


@dataclass(frozen=True)
class ImplTraitType:
    bounds: Tuple[Bound, ...]


@dataclass(frozen=True)
class DynTraitType:
    bounds: Tuple[Bound, ...]


@dataclass(frozen=True)
class BareFnArg:
    name: Optional[str]
    ty: Type


@dataclass(frozen=True)
class BareFnType:
    """
    Function pointer type: `for<'a> unsafe extern "C" fn(&'a u8) -> u8`.

    Rust Pattern: syn::TypeBareFn
    """
    lifetimes: Tuple[Lifetime, ...] = ()
    unsafe: bool = False
    abi: Optional[str] = None
    inputs: Tuple[BareFnArg, ...] = ()
    output: Optional[Type] = None


# ---------------------------------------------------------------------------
# Bounds and predicates
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TraitBound:
    """
    Rust Pattern: syn::TraitBound

    `maybe` marks a `?Sized` style bound; `lifetimes` is a `for<'a>` binder.
    """
    path: Path
    maybe: bool = False
    lifetimes: Tuple[Lifetime, ...] = ()


@dataclass(frozen=True)
class TypePredicate:
    """
    Where-clause predicate on a type: `for<'a> T: Trait<'a> + 'b`.

    Rust Pattern: syn::PredicateType
    """
    bounded_ty: Type
    bounds: Tuple[Bound, ...] = ()
    lifetimes: Tuple[Lifetime, ...] = ()


@dataclass(frozen=True)
class LifetimePredicate:
    """
    Rust Pattern: syn::PredicateLifetime
    """
    lifetime: Lifetime
    bounds: Tuple[Lifetime, ...] = ()


# ---------------------------------------------------------------------------
# Generics
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TypeParam:
    ident: str
    bounds: Tuple[Bound, ...] = ()
    default: Optional[Type] = None


@dataclass(frozen=True)
class LifetimeParam:
    lifetime: Lifetime
    bounds: Tuple[Lifetime, ...] = ()


@dataclass(frozen=True)
class ConstParam:
    ident: str
    ty: Type
    default: Optional[GenericArg] = None


@dataclass(frozen=True)
class WhereClause:
    predicates: Tuple[WherePredicate, ...] = ()


@dataclass(frozen=True)
class Generics:
    """
    Generic parameter list plus optional where clause.

    Rust Pattern: syn::Generics

    `where_clause is None` means no predicate list is attached at all, which
    is different from an attached but empty `where`.
    """
    params: Tuple[GenericParam, ...] = ()
    where_clause: Optional[WhereClause] = None

    @property
    def predicates(self) -> Tuple[WherePredicate, ...]:
        if self.where_clause is None:
            return ()
        return self.where_clause.predicates

    def type_params(self) -> Tuple[TypeParam, ...]:
        return tuple(p for p in self.params if isinstance(p, TypeParam))


# ---------------------------------------------------------------------------
# Attributes
# ---------------------------------------------------------------------------

class AttrStyle(Enum):
    """Attribute placement (Rust pattern: syn::AttrStyle, plus doc comments)"""
    OUTER = "outer"  # #[...]
    INNER = "inner"  # #![...] and //! doc comments
    DOC = "doc"      # /// doc comments


class MetaForm(Enum):
    """Shape of an attribute's meta (Rust pattern: syn::Meta)"""
    PATH = "path"              # name
    LIST = "list"              # name(...)
    NAME_VALUE = "name_value"  # name = value


@dataclass(frozen=True)
class Meta:
    """
    Attribute meta item: `path`, `path(...)` or `path = value`.

    `args` is the text between the list delimiters and `args_span` its
    absolute offsets in the source the meta was parsed from, so nested
    argument lists can be re-parsed with accurate locations.
    """
    path: str
    form: MetaForm
    args: Optional[str] = None
    args_span: Optional[Tuple[int, int]] = None
    location: Optional[SourceLocation] = None


@dataclass(frozen=True)
class Attribute:
    style: AttrStyle
    meta: Optional[Meta]
    text: str
    location: Optional[SourceLocation] = None

    @property
    def path(self) -> str:
        return self.meta.path if self.meta is not None else "doc"

    @property
    def args(self) -> Optional[str]:
        return self.meta.args if self.meta is not None else None

    @property
    def args_span(self) -> Optional[Tuple[int, int]]:
        return self.meta.args_span if self.meta is not None else None


# ---------------------------------------------------------------------------
# Impl items
# ---------------------------------------------------------------------------

class ItemKind(Enum):
    """Associated item kinds carried through verbatim"""
    CONST = "const"
    TYPE = "type"
    MACRO = "macro"


@dataclass(frozen=True)
class Method:
    """
    Method inside an impl block.

    Rust Pattern: syn::ImplItemFn

    Only generics are structural. `head` is the text from visibility up to
    the method name, `params` the parenthesized parameter list, `ret` the
    `-> Type` text (or None) and `body` the block or `;`.
    """
    name: str
    attrs: Tuple[Attribute, ...]
    head: str
    generics: Generics
    params: str
    ret: Optional[str]
    body: str
    location: Optional[SourceLocation] = None


@dataclass(frozen=True)
class VerbatimItem:
    """Associated const, associated type or macro invocation, kept as text."""
    kind: ItemKind
    attrs: Tuple[Attribute, ...]
    text: str
    location: Optional[SourceLocation] = None


@dataclass(frozen=True)
class ImplUnit:
    """
    Declaration unit: one `impl` block.

    Rust Pattern: syn::ItemImpl

    `trait_ref` is the verbatim trait text of a trait impl (`Display` in
    `impl Display for Foo`), None for an inherent impl. `text` is the
    unit's source text, attributes included.
    """
    attrs: Tuple[Attribute, ...]
    unsafe: bool
    generics: Generics
    trait_ref: Optional[str]
    self_ty: Type
    self_location: Optional[SourceLocation]
    inner_attrs: Tuple[Attribute, ...]
    items: Tuple[ImplItem, ...]
    text: str
    location: Optional[SourceLocation] = None

    def methods(self) -> Tuple[Method, ...]:
        return tuple(item for item in self.items if isinstance(item, Method))


Type: TypeAlias = Union[
    PathType, RefType, PtrType, TupleType, ParenType, SliceType, ArrayType,
    NeverType, ImplTraitType, DynTraitType, BareFnType,
]
PathArguments: TypeAlias = Union[AngleArgs, ParenArgs]
GenericArg: TypeAlias = Union[Type, Lifetime, AssocBinding, AssocConstraint, ConstArg]
Bound: TypeAlias = Union[TraitBound, Lifetime]
WherePredicate: TypeAlias = Union[TypePredicate, LifetimePredicate]
GenericParam: TypeAlias = Union[TypeParam, LifetimeParam, ConstParam]
ImplItem: TypeAlias = Union[Method, VerbatimItem]


def ident_type(ident: str) -> PathType:
    """Bare single-segment path type, e.g. `T`."""
    return PathType(Path((PathSegment(ident),)))
