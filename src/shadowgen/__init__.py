"""
shadowgen: generate shadow-type impl blocks for Rust.

    #[shadow_impl(transform_bounds(T))]
    impl<T: Clone> Foo<T> { ... }

expands to the unchanged block followed by

    impl<T> ShadowFoo<T>
    where
        T::Shadowed: Clone,
        T: Shadow,
    { ... }
"""

from .compiler.driver import ExpansionDriver, ExpansionResult
from .frontend.parser import Parser
from .passes.directives import TransformDirective
from .shared.errors import (
    ShadowgenError, ParseError, MalformedDirective, UnsupportedSelfType,
    UnsupportedMethodForm, ShadowgenImplementationError,
)

__version__ = "0.1.0"

__all__ = [
    "ExpansionDriver",
    "ExpansionResult",
    "Parser",
    "TransformDirective",
    "ShadowgenError",
    "ParseError",
    "MalformedDirective",
    "UnsupportedSelfType",
    "UnsupportedMethodForm",
    "ShadowgenImplementationError",
]
