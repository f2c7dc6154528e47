"""
Expansion passes.

Rust Pattern: rustc_mir::transform

Unit scope: DirectiveParsingPass -> SelfTypeRewritePass ->
NormalizeGenericsPass -> TransformBoundsPass -> AugmentBoundsPass.
Method scope: MethodAugmentPass. Output: EmitPass.
"""

from .base import BasePass, ExpansionContext, PassManager
from .directives import (
    DirectiveKeyword, DirectiveParsingPass, TransformDirective, baseline_predicate,
    is_marker, parse_directive,
)
from .self_type import SelfTypeRewritePass, shadow_type_of
from .normalize import NormalizeGenericsPass, normalize_generics
from .transform import BoundRewriter, TransformBoundsPass, project_type, transform_predicates
from .augment import AugmentBoundsPass, augment_generics
from .methods import MethodAugmentPass, check_method_marker, method_directive
from .emit import EmitPass, render_expansion, render_unit
