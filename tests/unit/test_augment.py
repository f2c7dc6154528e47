#!/usr/bin/env python3
"""
Tests for bound augmentation: baselines and literal predicates are
appended after the transformed ones.
"""

from shadowgen.passes.augment import augment_generics
from shadowgen.passes.directives import TransformDirective
from tests.test_utils import parse_predicates, printed


def _generics(parser, header: str):
    return parser.parse_impl(f"{header} {{}}").generics


class TestAugmentGenerics:
    def test_nothing_to_add(self, parser):
        generics = augment_generics(_generics(parser, "impl<T> Foo<T>"), TransformDirective())
        assert generics.where_clause is None

    def test_empty_where_clause_is_dropped(self, parser):
        generics = augment_generics(_generics(parser, "impl<T> Foo<T> where"), TransformDirective())
        assert generics.where_clause is None

    def test_creates_where_clause(self, parser):
        directive = TransformDirective(["T"], parse_predicates(parser, "T: Debug"))
        generics = augment_generics(_generics(parser, "impl<T> Foo<T>"), directive)
        assert printed(generics.predicates) == ["T: Shadow", "T: Debug"]

    def test_order(self, parser):
        directive = TransformDirective(["T", "U"], parse_predicates(parser, "U: Eq"))
        generics = augment_generics(_generics(parser, "impl<T, U> Foo<T, U> where T: Clone"), directive)
        assert printed(generics.predicates) == ["T: Clone", "T: Shadow", "U: Shadow", "U: Eq"]

    def test_literals_are_not_deduplicated(self, parser):
        directive = TransformDirective(["T"], parse_predicates(parser, "T: Shadow"))
        generics = augment_generics(_generics(parser, "impl<T> Foo<T>"), directive)
        assert printed(generics.predicates) == ["T: Shadow", "T: Shadow"]

    def test_params_are_kept(self, parser):
        original = _generics(parser, "impl<'a, T> Foo<'a, T>")
        generics = augment_generics(original, TransformDirective(["T"]))
        assert generics.params == original.params
