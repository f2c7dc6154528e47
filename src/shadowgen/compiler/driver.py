"""
Expansion Driver

Rust Pattern: rustc_driver::driver

Runs one expansion end to end: parse the item, run the passes, render the
original item followed by the generated shadow unit. Every user-caused
failure is reported through the context's ErrorReporter and turned into an
unsuccessful result; nothing is emitted in that case.
"""

import logging
from dataclasses import replace
from typing import Callable, Optional, Tuple

from ..frontend.parser import Parser
from ..passes.augment import AugmentBoundsPass
from ..passes.base import ExpansionContext, PassManager
from ..passes.directives import DirectiveParsingPass, is_marker
from ..passes.emit import EmitPass, render_expansion
from ..passes.methods import MethodAugmentPass, check_method_marker
from ..passes.normalize import NormalizeGenericsPass
from ..passes.self_type import SelfTypeRewritePass
from ..passes.transform import TransformBoundsPass
from ..shared.errors import MalformedDirective, ShadowgenError
from ..shared.nodes import ImplUnit, MetaForm
from ..shared.source_location import SourceLocation
from ..utils.config import DEFAULT_ARGS_FILE, DEFAULT_SOURCE_FILE, UNIT_MARKER

logger = logging.getLogger(__name__)


class ExpansionResult:
    """Expansion result"""
    def __init__(
        self,
        output: Optional[str] = None,
        original: Optional[str] = None,
        generated: Optional[str] = None,
        unit: Optional[ImplUnit] = None,
        ctx: Optional[ExpansionContext] = None,
        success: bool = False,
    ):
        self.output = output
        self.original = original
        self.generated = generated
        self.unit = unit
        self.ctx = ctx
        self.success = success

    def has_errors(self) -> bool:
        """True if the expansion reported errors."""
        if self.ctx and self.ctx.reporter:
            return self.ctx.reporter.has_errors()
        return not self.success

    def get_errors(self) -> list:
        """Formatted diagnostics (plain text, no colour)"""
        if self.ctx and self.ctx.reporter and self.ctx.reporter.has_errors():
            return [self.ctx.reporter.format_error(e, color=False) for e in self.ctx.reporter.errors]
        return []


def strip_marker(source: str, location: SourceLocation) -> str:
    """
    Remove the attribute at `location` from `source`.

    A marker alone on its line takes the whole line with it; an inline
    marker takes the whitespace that follows it.
    """
    start, end = location.start, location.end
    line_start = source.rfind("\n", 0, start) + 1
    after = end
    while after < len(source) and source[after] in " \t":
        after += 1
    if not source[line_start:start].strip():
        if after == len(source) or source[after] == "\n":
            return source[:line_start] + source[after + 1:]
    return source[:start] + source[after:]


class ExpansionDriver:
    """
    Expansion driver (Rust naming: rustc_driver::driver).

    The driver owns one Parser and one PassManager, both reusable across
    calls; each call gets a fresh ExpansionContext.
    """

    def __init__(self, parser: Optional[Parser] = None):
        self.pass_manager = PassManager()
        self.parser = parser if parser is not None else Parser()
        self._register_passes()

    def _register_passes(self) -> None:
        """
        Register all passes; the manager orders them by `requires`.

        1. DirectiveParsingPass  (unit marker arguments)
        2. SelfTypeRewritePass   (Foo -> ShadowFoo)
        3. NormalizeGenericsPass -> TransformBoundsPass -> AugmentBoundsPass
        4. MethodAugmentPass     (per-method scopes)
        5. EmitPass
        """
        self.pass_manager.register_pass(DirectiveParsingPass)
        self.pass_manager.register_pass(SelfTypeRewritePass)
        self.pass_manager.register_pass(NormalizeGenericsPass)
        self.pass_manager.register_pass(TransformBoundsPass)
        self.pass_manager.register_pass(AugmentBoundsPass)
        self.pass_manager.register_pass(MethodAugmentPass)
        self.pass_manager.register_pass(EmitPass)

    def _new_context(self, source: str, source_file: str) -> ExpansionContext:
        ctx = ExpansionContext(source_file)
        ctx.parser = self.parser
        ctx.source_files[source_file] = source
        return ctx

    def expand(self, args: str, item: str, source_file: str = DEFAULT_SOURCE_FILE) -> ExpansionResult:
        """
        Expand `item` under the unit marker whose argument text is `args`.

        `item` is the impl block without its marker (what a proc-macro
        attribute receives); `args` is the text inside the marker's
        parentheses, possibly empty.
        """
        ctx = self._new_context(item, source_file)
        ctx.args_source = args
        ctx.args_file = DEFAULT_ARGS_FILE
        ctx.source_files[DEFAULT_ARGS_FILE] = args

        def prepare() -> Tuple[ImplUnit, str]:
            return self.parser.parse_impl(item, source_file), item

        return self._run(ctx, prepare)

    def expand_source(self, source: str, source_file: str = DEFAULT_SOURCE_FILE) -> ExpansionResult:
        """
        Expand an impl block that still carries its `#[shadow_impl(...)]` marker.

        The marker is located among the block's outer attributes, its
        arguments are parsed in place and it is removed from the original
        text before that text is echoed.
        """
        ctx = self._new_context(source, source_file)

        def prepare() -> Tuple[ImplUnit, str]:
            unit = self.parser.parse_impl(source, source_file)
            markers = [attr for attr in unit.attrs if is_marker(attr, UNIT_MARKER)]
            if not markers:
                raise MalformedDirective(
                    f"missing `#[{UNIT_MARKER}]` marker",
                    unit.location,
                    help=f"annotate the impl block with `#[{UNIT_MARKER}(...)]`",
                )
            if len(markers) > 1:
                raise MalformedDirective(
                    f"duplicate `#[{UNIT_MARKER}]` marker",
                    markers[1].location,
                    help="merge the directives into a single marker",
                )
            marker = markers[0]
            if marker.meta.form is MetaForm.NAME_VALUE:
                raise MalformedDirective(
                    f"`{UNIT_MARKER}` does not take a value",
                    marker.location,
                    help=f"write `#[{UNIT_MARKER}(...)]`",
                )
            if marker.meta.form is MetaForm.LIST:
                ctx.args_source = source
                ctx.args_file = source_file
                ctx.args_span = marker.args_span
            logger.debug(f"found unit marker at {marker.location}")
            unit = replace(unit, attrs=tuple(a for a in unit.attrs if a is not marker))
            return unit, strip_marker(source, marker.location)

        return self._run(ctx, prepare)

    def check_method_marker(self, item: str, source_file: str = DEFAULT_SOURCE_FILE) -> ExpansionResult:
        """
        Apply the method marker to a single item on its own.

        Methods pass through unchanged; anything else fails with
        UnsupportedMethodForm.
        """
        ctx = self._new_context(item, source_file)
        try:
            check_method_marker(self.parser, item, source_file)
        except ShadowgenError as e:
            return self._fail(ctx, e)
        return ExpansionResult(output=item, original=item, ctx=ctx, success=True)

    def _run(self, ctx: ExpansionContext, prepare: Callable[[], Tuple[ImplUnit, str]]) -> ExpansionResult:
        try:
            unit, original = prepare()
            ctx.original_unit = unit
            generated_unit = self.pass_manager.run_all(unit, ctx)
        except ShadowgenError as e:
            return self._fail(ctx, e)

        generated = ctx.get_analysis(EmitPass)
        return ExpansionResult(
            output=render_expansion(original, generated),
            original=original,
            generated=generated,
            unit=generated_unit,
            ctx=ctx,
            success=True,
        )

    @staticmethod
    def _fail(ctx: ExpansionContext, error: ShadowgenError) -> ExpansionResult:
        logger.debug(f"expansion failed: [{error.error_code}] {error.message}")
        ctx.reporter.report_exception(error)
        return ExpansionResult(ctx=ctx, success=False)
