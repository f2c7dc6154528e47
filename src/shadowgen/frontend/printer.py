"""
Syntax nodes -> Rust source text.

Only the structural parts of an impl block are printed: types, bounds,
predicates and generic parameter lists. Everything else is emitted from
verbatim source slices.
"""

from typing import Callable, Dict, Iterable, Optional

from ..shared.errors import ShadowgenImplementationError
from ..shared.nodes import (
    ArrayType, AssocBinding, AssocConstraint, BareFnType, ConstArg,
    ConstParam, DynTraitType, Generics, ImplTraitType, Lifetime, LifetimeParam,
    LifetimePredicate, NeverType, ParenArgs, ParenType, Path, PathSegment,
    PathType, PtrType, RefType, SliceType, TupleType, TypeParam,
    TypePredicate, WhereClause,
)
from ..utils.config import INDENT


def print_path(path: Path) -> str:
    prefix = "::" if path.leading_colon else ""
    return prefix + "::".join(_print_segment(s) for s in path.segments)


def _print_segment(segment: PathSegment) -> str:
    args = segment.arguments
    if args is None:
        return segment.ident
    if isinstance(args, ParenArgs):
        inputs = ", ".join(print_type(t) for t in args.inputs)
        output = f" -> {print_type(args.output)}" if args.output is not None else ""
        return f"{segment.ident}({inputs}){output}"
    sep = "::" if args.turbofish else ""
    return f"{segment.ident}{sep}<{', '.join(print_generic_arg(a) for a in args.args)}>"


def print_generic_arg(arg) -> str:
    if isinstance(arg, Lifetime):
        return arg.name
    if isinstance(arg, AssocBinding):
        return f"{arg.ident} = {print_type(arg.ty)}"
    if isinstance(arg, AssocConstraint):
        return f"{arg.ident}: {print_bounds(arg.bounds)}"
    if isinstance(arg, ConstArg):
        return arg.text
    return print_type(arg)


def _for_binder(lifetimes) -> str:
    if not lifetimes:
        return ""
    return f"for<{', '.join(lt.name for lt in lifetimes)}> "


def print_bound(bound) -> str:
    if isinstance(bound, Lifetime):
        return bound.name
    maybe = "?" if bound.maybe else ""
    return f"{maybe}{_for_binder(bound.lifetimes)}{print_path(bound.path)}"


def print_bounds(bounds: Iterable) -> str:
    return " + ".join(print_bound(b) for b in bounds)


def _print_path_type(ty: PathType) -> str:
    if ty.qself is None:
        return print_path(ty.path)
    qself = print_type(ty.qself.ty)
    if ty.qself.as_trait is not None:
        qself += f" as {print_path(ty.qself.as_trait)}"
    return f"<{qself}>::{print_path(ty.path)}"


def _print_ref(ty: RefType) -> str:
    lifetime = f"{ty.lifetime.name} " if ty.lifetime is not None else ""
    mutable = "mut " if ty.mutable else ""
    return f"&{lifetime}{mutable}{print_type(ty.elem)}"


def _print_tuple(ty: TupleType) -> str:
    if len(ty.elems) == 1:
        return f"({print_type(ty.elems[0])},)"
    return f"({', '.join(print_type(t) for t in ty.elems)})"


def _print_bare_fn(ty: BareFnType) -> str:
    parts = [_for_binder(ty.lifetimes)]
    if ty.unsafe:
        parts.append("unsafe ")
    if ty.abi is not None:
        parts.append(f"extern {ty.abi} " if ty.abi else "extern ")
    inputs = ", ".join(
        f"{a.name}: {print_type(a.ty)}" if a.name else print_type(a.ty) for a in ty.inputs
    )
    parts.append(f"fn({inputs})")
    if ty.output is not None:
        parts.append(f" -> {print_type(ty.output)}")
    return "".join(parts)


_TYPE_PRINTERS: Dict[type, Callable] = {
    PathType: _print_path_type,
    RefType: _print_ref,
    PtrType: lambda ty: f"*{'mut' if ty.mutable else 'const'} {print_type(ty.elem)}",
    TupleType: _print_tuple,
    ParenType: lambda ty: f"({print_type(ty.elem)})",
    SliceType: lambda ty: f"[{print_type(ty.elem)}]",
    ArrayType: lambda ty: f"[{print_type(ty.elem)}; {ty.length}]",
    NeverType: lambda ty: "!",
    ImplTraitType: lambda ty: f"impl {print_bounds(ty.bounds)}",
    DynTraitType: lambda ty: f"dyn {print_bounds(ty.bounds)}",
    BareFnType: _print_bare_fn,
}


def print_type(ty) -> str:
    printer = _TYPE_PRINTERS.get(type(ty))
    if printer is None:
        raise ShadowgenImplementationError(f"no printer for type node {type(ty).__name__}")
    return printer(ty)


def print_predicate(predicate) -> str:
    if isinstance(predicate, LifetimePredicate):
        if not predicate.bounds:
            return f"{predicate.lifetime.name}:"
        return f"{predicate.lifetime.name}: {' + '.join(lt.name for lt in predicate.bounds)}"
    if isinstance(predicate, TypePredicate):
        subject = _for_binder(predicate.lifetimes) + print_type(predicate.bounded_ty)
        if not predicate.bounds:
            return f"{subject}:"
        return f"{subject}: {print_bounds(predicate.bounds)}"
    raise ShadowgenImplementationError(f"not a where predicate: {predicate!r}")


def print_generic_param(param, names_only: bool = False) -> str:
    """
    Print one generic parameter.

    With `names_only`, bounds and defaults are dropped (`T`, `'a`,
    `const N: usize`), which is the form an impl header re-uses after its
    bounds have moved into the where clause.
    """
    if isinstance(param, TypeParam):
        text = param.ident
        if names_only:
            return text
        if param.bounds:
            text += f": {print_bounds(param.bounds)}"
        if param.default is not None:
            text += f" = {print_type(param.default)}"
        return text
    if isinstance(param, LifetimeParam):
        if names_only or not param.bounds:
            return param.lifetime.name
        return f"{param.lifetime.name}: {' + '.join(lt.name for lt in param.bounds)}"
    if isinstance(param, ConstParam):
        text = f"const {param.ident}: {print_type(param.ty)}"
        if param.default is not None and not names_only:
            text += f" = {print_generic_arg(param.default)}"
        return text
    raise ShadowgenImplementationError(f"not a generic parameter: {param!r}")


def print_generic_params(generics: Generics, names_only: bool = False) -> str:
    if not generics.params:
        return ""
    return "<" + ", ".join(print_generic_param(p, names_only) for p in generics.params) + ">"


def print_where_clause(where_clause: Optional[WhereClause], indent: str = "") -> str:
    """
    Multi-line where clause starting with a newline, or "" when none.

    `indent` is the indentation of the `where` keyword; predicates go one
    level deeper, one per line with trailing commas.
    """
    if where_clause is None or not where_clause.predicates:
        return ""
    lines = [f"\n{indent}where"]
    lines.extend(f"{indent}{INDENT}{print_predicate(p)}," for p in where_clause.predicates)
    return "\n".join(lines) + "\n"
