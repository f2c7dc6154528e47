"""
Shared components: syntax nodes, source locations and error reporting.
"""

from .source_location import SourceLocation
from .errors import (
    Diagnostic, ErrorReporter,
    ShadowgenError, ParseError, MalformedDirective, UnsupportedSelfType,
    UnsupportedMethodForm, ShadowgenImplementationError,
)
from .nodes import (
    Lifetime, Path, PathSegment, AngleArgs, ParenArgs,
    AssocBinding, AssocConstraint, ConstArg,
    QSelf, PathType, RefType, PtrType, TupleType, ParenType, SliceType,
    ArrayType, NeverType, ImplTraitType, DynTraitType, BareFnArg, BareFnType,
    TraitBound, TypePredicate, LifetimePredicate,
    TypeParam, LifetimeParam, ConstParam, WhereClause, Generics,
    AttrStyle, MetaForm, Meta, Attribute,
    ItemKind, Method, VerbatimItem, ImplUnit,
    ident_type,
)
