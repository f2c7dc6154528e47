#!/usr/bin/env python3
"""
Tests for bound transformation: root occurrences of projected parameters
become `T::Shadowed`.
"""

import pytest

from shadowgen.frontend.printer import print_type
from shadowgen.passes.directives import TransformDirective
from shadowgen.passes.transform import project_type, transform_generics, transform_predicates
from tests.test_utils import parse_predicates, printed


def _transform(parser, text: str, projected=("T",)):
    return printed(transform_predicates(parse_predicates(parser, text), projected))


class TestRootOccurrences:
    """Bare occurrences are projected"""

    @pytest.mark.parametrize("original,expected", [
        ("T: Clone", "T::Shadowed: Clone"),
        ("S: Sum<T>", "S: Sum<T::Shadowed>"),
        ("<T as MakeBar>::Bar: Into<u32>", "<T::Shadowed as MakeBar>::Bar: Into<u32>"),
        ("&'a T: IntoIterator", "&'a T::Shadowed: IntoIterator"),
        ("*const T: Send", "*const T::Shadowed: Send"),
        ("[T]: ToOwned", "[T::Shadowed]: ToOwned"),
        ("[T; 4]: Default", "[T::Shadowed; 4]: Default"),
        ("(T, U): Eq", "(T::Shadowed, U): Eq"),
        ("F: Fn(T) -> T", "F: Fn(T::Shadowed) -> T::Shadowed"),
        ("I: Iterator<Item = T>", "I: Iterator<Item = T::Shadowed>"),
        ("for<'a> &'a T: Add<&'a T>", "for<'a> &'a T::Shadowed: Add<&'a T::Shadowed>"),
        ("fn(T) -> T: Copy", "fn(T::Shadowed) -> T::Shadowed: Copy"),
        ("S: std::ops::Add<T, Output = S>", "S: std::ops::Add<T::Shadowed, Output = S>"),
    ])
    def test_projected(self, parser, original, expected):
        assert _transform(parser, original) == [expected]


class TestUntouched:
    """Occurrences nested in other path types, and lifetimes, are left alone"""

    @pytest.mark.parametrize("original", [
        "Vec<T>: Debug",
        "S: Sum<Vec<T>>",
        "T::Item: Eq",
        "'a: 'b",
        "U: Clone",
        "Box<dyn Fn(T)>: Send",
        "TT: Clone",
    ])
    def test_untouched(self, parser, original):
        assert _transform(parser, original) == [original]


class TestTransformPredicates:
    def test_several_parameters(self, parser):
        result = _transform(parser, "R: Clone, T: Clone, S: Sum<R>, S: Sum<T>", projected=("R", "T"))
        assert result == [
            "R::Shadowed: Clone",
            "T::Shadowed: Clone",
            "S: Sum<R::Shadowed>",
            "S: Sum<T::Shadowed>",
        ]

    def test_nothing_projected(self, parser):
        assert _transform(parser, "T: Clone", projected=()) == ["T: Clone"]

    def test_inputs_unchanged(self, parser):
        predicates = parse_predicates(parser, "T: Clone")
        transform_predicates(predicates, ("T",))
        assert printed(predicates) == ["T: Clone"]

    def test_project_type(self):
        assert print_type(project_type("T")) == "T::Shadowed"


class TestTransformGenerics:
    def test_no_projection_returns_input(self, parser):
        generics = parser.parse_impl("impl<T> Foo<T> where T: Clone {}").generics
        assert transform_generics(generics, TransformDirective()) is generics

    def test_no_where_clause_returns_input(self, parser):
        generics = parser.parse_impl("impl<T> Foo<T> {}").generics
        assert transform_generics(generics, TransformDirective(["T"])) is generics

    def test_params_are_kept(self, parser):
        generics = parser.parse_impl("impl<T> Foo<T> where T: Clone {}").generics
        transformed = transform_generics(generics, TransformDirective(["T"]))
        assert transformed.params == generics.params
        assert printed(transformed.predicates) == ["T::Shadowed: Clone"]
