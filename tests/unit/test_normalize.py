#!/usr/bin/env python3
"""
Tests for generic-list normalization: inline bounds move into the where
clause.
"""

from shadowgen.frontend.printer import print_generic_params
from shadowgen.passes.normalize import normalize_generics
from tests.test_utils import printed


def _generics(parser, header: str):
    return parser.parse_impl(f"{header} {{}}").generics


class TestNormalizeGenerics:
    def test_moves_inline_bounds(self, parser):
        generics = normalize_generics(
            _generics(parser, "impl<'a: 'b, 'b, T: Clone + 'a, U, const N: usize> Foo")
        )
        assert print_generic_params(generics) == "<'a, 'b, T, U, const N: usize>"
        assert printed(generics.predicates) == ["'a: 'b", "T: Clone + 'a"]

    def test_existing_predicates_come_first(self, parser):
        generics = normalize_generics(_generics(parser, "impl<T: Clone> Foo<T> where T: Debug"))
        assert printed(generics.predicates) == ["T: Debug", "T: Clone"]

    def test_defaults_are_kept(self, parser):
        generics = normalize_generics(_generics(parser, "impl<T: Clone = u8> Foo<T>"))
        assert print_generic_params(generics) == "<T = u8>"

    def test_idempotent(self, parser):
        once = normalize_generics(_generics(parser, "impl<T: Clone, 'a: 'b, 'b> Foo"))
        assert normalize_generics(once) == once

    def test_nothing_to_move(self, parser):
        generics = _generics(parser, "impl<T, const N: usize> Foo<T, N>")
        assert normalize_generics(generics) is generics
        assert generics.where_clause is None

    def test_empty(self, parser):
        generics = _generics(parser, "impl Foo")
        assert normalize_generics(generics) is generics
