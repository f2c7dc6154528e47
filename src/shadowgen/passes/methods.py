"""
Method augmentation.

Each method is handled as its own scope: its generics are normalized,
transformed and augmented with the directive collected from its own
`#[shadow_method(...)]` markers. The unit directive does not leak into
methods and one method's directive does not leak into another.
"""

import logging
from dataclasses import replace
from typing import Tuple

from ..shared.errors import MalformedDirective, UnsupportedMethodForm
from ..shared.nodes import Attribute, ImplUnit, MetaForm, Method, VerbatimItem
from ..utils.config import DEFAULT_SOURCE_FILE, METHOD_MARKER
from .augment import augment_generics
from .base import BasePass, ExpansionContext
from .directives import DirectiveParsingPass, TransformDirective, is_marker, parse_directive
from .normalize import normalize_generics
from .transform import transform_generics

logger = logging.getLogger(__name__)


def method_directive(parser, method: Method, source: str,
                     source_file: str = DEFAULT_SOURCE_FILE) -> TransformDirective:
    """
    Merge the directives of every method marker on `method`.

    A bare `#[shadow_method]` contributes nothing; the name-value form is
    rejected.
    """
    directive = TransformDirective()
    for attr in method.attrs:
        if not is_marker(attr, METHOD_MARKER):
            continue
        if attr.meta.form is MetaForm.NAME_VALUE:
            raise MalformedDirective(
                f"`{METHOD_MARKER}` does not take a value",
                attr.location,
                help=f"write `#[{METHOD_MARKER}(...)]`",
            )
        if attr.meta.form is MetaForm.LIST:
            directive.merge(parse_directive(parser, source, source_file, attr.args_span))
    return directive


def strip_method_markers(attrs: Tuple[Attribute, ...]) -> Tuple[Attribute, ...]:
    return tuple(attr for attr in attrs if not is_marker(attr, METHOD_MARKER))


def augment_method(method: Method, directive: TransformDirective) -> Method:
    """Normalize, transform and augment one method's generics; drop its markers."""
    generics = normalize_generics(method.generics)
    generics = transform_generics(generics, directive)
    generics = augment_generics(generics, directive)
    return replace(method, attrs=strip_method_markers(method.attrs), generics=generics)


def reject_marked_item(item: VerbatimItem) -> None:
    for attr in item.attrs:
        if is_marker(attr, METHOD_MARKER):
            raise UnsupportedMethodForm(
                f"`#[{METHOD_MARKER}]` can only be applied to methods",
                item.location or attr.location,
                help=f"remove the marker from this associated {item.kind.value}",
                label="not a method",
            )


def check_method_marker(parser, item_text: str, source_file: str = DEFAULT_SOURCE_FILE) -> Method:
    """
    The method marker applied to a single item in isolation.

    A method comes back unchanged; anything else is an UnsupportedMethodForm.
    """
    item = parser.parse_item(item_text, source_file)
    if not isinstance(item, Method):
        raise UnsupportedMethodForm(
            f"`#[{METHOD_MARKER}]` can only be applied to methods",
            item.location,
            help=f"found an associated {item.kind.value}",
            label="not a method",
        )
    return item


class MethodAugmentPass(BasePass):
    """Give every method of the generated unit its own scoped bounds."""
    requires = [DirectiveParsingPass]

    def run(self, unit: ImplUnit, ctx: ExpansionContext) -> ImplUnit:
        source = ctx.source_files[ctx.source_file]
        items = []
        for item in unit.items:
            if isinstance(item, VerbatimItem):
                reject_marked_item(item)
                items.append(item)
                continue
            directive = method_directive(ctx.parser, item, source, ctx.source_file)
            logger.debug(f"method `{item.name}`: {directive!r}")
            items.append(augment_method(item, directive))
        return replace(unit, items=tuple(items))
