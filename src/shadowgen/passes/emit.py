"""
Emission of the generated unit.

The generated block re-uses verbatim slices for everything it does not
rewrite (attributes, trait reference, method heads, parameter lists,
return types, bodies, non-method items) and prints the rest: generic
parameter names, the shadow self type and the where clauses.
"""

import logging
from typing import List

from ..frontend.printer import print_generic_params, print_type, print_where_clause
from ..shared.nodes import ImplUnit, Method
from ..utils.config import INDENT
from .augment import AugmentBoundsPass
from .base import BasePass, ExpansionContext
from .methods import MethodAugmentPass
from .self_type import SelfTypeRewritePass

logger = logging.getLogger(__name__)


def render_method(method: Method, indent: str = INDENT) -> str:
    lines = [f"{indent}{attr.text}" for attr in method.attrs]
    signature = (
        f"{indent}{method.head}"
        f"{print_generic_params(method.generics)}"
        f"{method.params}"
    )
    if method.ret:
        signature += f" {method.ret}"
    where = print_where_clause(method.generics.where_clause, indent)
    if method.body == ";":
        signature += where.rstrip("\n").rstrip(",") + ";"
    elif where:
        signature += f"{where}{indent}{method.body}"
    else:
        signature += f" {method.body}"
    lines.append(signature)
    return "\n".join(lines)


def render_item(item, indent: str = INDENT) -> str:
    if isinstance(item, Method):
        return render_method(item, indent)
    lines = [f"{indent}{attr.text}" for attr in item.attrs]
    lines.append(f"{indent}{item.text}")
    return "\n".join(lines)


def render_unit(unit: ImplUnit) -> str:
    """Render a whole impl block; the self type and predicates are printed from nodes."""
    lines: List[str] = [attr.text for attr in unit.attrs]

    header = "unsafe impl" if unit.unsafe else "impl"
    header += print_generic_params(unit.generics, names_only=True)
    header += " "
    if unit.trait_ref is not None:
        header += f"{unit.trait_ref} for "
    header += print_type(unit.self_ty)
    where = print_where_clause(unit.generics.where_clause)
    header += f"{where}{{" if where else " {"

    blocks = []
    if unit.inner_attrs:
        blocks.append("\n".join(f"{INDENT}{attr.text}" for attr in unit.inner_attrs))
    blocks.extend(render_item(item) for item in unit.items)

    if not blocks:
        lines.append(header + "}")
    else:
        lines.append(header)
        lines.append("\n\n".join(blocks))
        lines.append("}")
    return "\n".join(lines)


def render_expansion(original: str, generated: str) -> str:
    """The original item untouched, one blank line, then the generated unit."""
    separator = "\n" if original.endswith("\n") else "\n\n"
    return f"{original}{separator}{generated}\n"


class EmitPass(BasePass):
    """Render the generated unit; the text is stored as this pass's analysis."""
    requires = [SelfTypeRewritePass, AugmentBoundsPass, MethodAugmentPass]

    def run(self, unit: ImplUnit, ctx: ExpansionContext) -> ImplUnit:
        generated = render_unit(unit)
        logger.debug(f"generated {generated.count(chr(10)) + 1} line(s)")
        ctx.set_analysis(EmitPass, generated)
        return unit
