#!/usr/bin/env python3
"""
End-to-end expansion tests: a marked impl block in, the original block
plus its shadow counterpart out.
"""

from textwrap import dedent

from tests.test_utils import expand_ok, method_predicates, unit_predicates


class TestInherentImpls:
    """Inherent impl blocks"""

    def test_simple(self, driver):
        source = dedent("""\
            #[shadow_impl]
            impl Foo {
                pub fn get_slice(&self) -> &[u32] {
                    &self.field
                }

                pub fn get_first(&self) -> Option<&u32> {
                    self.field.first()
                }
            }
        """)
        result = expand_ok(driver, source)
        expected_original = source.replace("#[shadow_impl]\n", "")
        expected_generated = dedent("""\
            impl ShadowFoo {
                pub fn get_slice(&self) -> &[u32] {
                    &self.field
                }

                pub fn get_first(&self) -> Option<&u32> {
                    self.field.first()
                }
            }""")
        assert result.original == expected_original
        assert result.generated == expected_generated
        assert result.output == expected_original + "\n" + expected_generated + "\n"

    def test_generic_self_type_with_added_bounds(self, driver):
        source = dedent("""\
            #[shadow_impl(add_bounds(T: Shadow<Shadowed = T>))]
            impl<T> Foo<T> {
                fn get_slice(&self) -> &[T] {
                    &self.field
                }

                #[shadow_method(transform_bounds(T))]
                fn element_eq(&self, index: usize, value: &T) -> bool
                where
                    T: Eq,
                {
                    self.field[index].eq(value)
                }
            }""")
        result = expand_ok(driver, source)
        assert result.generated == dedent("""\
            impl<T> ShadowFoo<T>
            where
                T: Shadow<Shadowed = T>,
            {
                fn get_slice(&self) -> &[T] {
                    &self.field
                }

                fn element_eq(&self, index: usize, value: &T) -> bool
                where
                    T::Shadowed: Eq,
                    T: Shadow,
                {
                    self.field[index].eq(value)
                }
            }""")

    def test_original_keeps_method_markers(self, driver):
        source = dedent("""\
            #[shadow_impl]
            impl Foo {
                #[shadow_method(transform_bounds(T))]
                fn f<T>(&self) where T: Clone {}
            }""")
        result = expand_ok(driver, source)
        assert "#[shadow_method(transform_bounds(T))]" in result.original
        assert "shadow_method" not in result.generated

    def test_transformed_unit_bounds(self, driver):
        source = dedent("""\
            #[shadow_impl(transform_bounds(T))]
            impl<T: Clone> Foo<T> {
                #[shadow_method(transform_bounds(T))]
                pub fn sum<S>(&self) -> S
                where
                    S: Sum<T>,
                {
                    self.items.iter().cloned().sum()
                }
            }""")
        result = expand_ok(driver, source)
        assert result.generated == dedent("""\
            impl<T> ShadowFoo<T>
            where
                T::Shadowed: Clone,
                T: Shadow,
            {
                pub fn sum<S>(&self) -> S
                where
                    S: Sum<T::Shadowed>,
                    T: Shadow,
                {
                    self.items.iter().cloned().sum()
                }
            }""")

    def test_associated_type_projection(self, driver):
        source = dedent("""\
            #[shadow_impl(transform_bounds(T))]
            impl<T: MakeBar> Foo<T>
            where
                <T as MakeBar>::Bar: Into<u32>,
            {
                pub fn get_bar_u32(&self) -> u32 {
                    self.field.make_bar().into()
                }
            }""")
        result = expand_ok(driver, source)
        assert result.generated.startswith(dedent("""\
            impl<T> ShadowFoo<T>
            where
                <T::Shadowed as MakeBar>::Bar: Into<u32>,
                T::Shadowed: MakeBar,
                T: Shadow,
            {"""))

    def test_multiple_parameters(self, driver):
        source = dedent("""\
            #[shadow_impl(transform_bounds(R, T))]
            impl<R, T> Foo<R, T> {
                #[shadow_method(transform_bounds(R, T))]
                pub fn sum<S>(&self) -> S
                where
                    R: Clone,
                    T: Clone,
                    S: Sum<R>,
                    S: Sum<T>,
                    S: std::ops::Add<Output = S>,
                {
                    self.elements1.iter().cloned().sum::<S>() + self.elements2.iter().cloned().sum::<S>()
                }
            }""")
        result = expand_ok(driver, source)
        assert unit_predicates(result) == {"R: Shadow", "T: Shadow"}
        assert method_predicates(result, "sum") == {
            "R::Shadowed: Clone",
            "T::Shadowed: Clone",
            "S: Sum<R::Shadowed>",
            "S: Sum<T::Shadowed>",
            "S: std::ops::Add<Output = S>",
            "R: Shadow",
            "T: Shadow",
        }

    def test_const_params_kept(self, driver):
        source = "#[shadow_impl(transform_bounds(T))]\nimpl<T: Clone, const N: usize> Foo<T, N> {}"
        result = expand_ok(driver, source)
        assert result.generated == (
            "impl<T, const N: usize> ShadowFoo<T, N>\n"
            "where\n"
            "    T::Shadowed: Clone,\n"
            "    T: Shadow,\n"
            "{}"
        )

    def test_lifetimes_untouched(self, driver):
        source = "#[shadow_impl(transform_bounds(T))]\nimpl<'a, T: 'a> Foo<'a, T> where 'a: 'static {}"
        result = expand_ok(driver, source)
        assert unit_predicates(result) == {"'a: 'static", "T::Shadowed: 'a", "T: Shadow"}


class TestTraitImpls:
    def test_trait_impl(self, driver):
        source = dedent("""\
            #[shadow_impl(add_bounds(T: Shadow<Shadowed = T>))]
            impl<T> GetSlice<T> for Foo<T> {
                type Out = T;

                fn get_slice(&self) -> &[T] {
                    &self.field
                }
            }""")
        result = expand_ok(driver, source)
        assert result.generated == dedent("""\
            impl<T> GetSlice<T> for ShadowFoo<T>
            where
                T: Shadow<Shadowed = T>,
            {
                type Out = T;

                fn get_slice(&self) -> &[T] {
                    &self.field
                }
            }""")

    def test_bounds_alias(self, driver):
        source = "#[shadow_impl(bounds(T: Shadow<Shadowed = T>))]\nimpl<T> GetSlice<T> for Foo<T> {}"
        result = expand_ok(driver, source)
        assert unit_predicates(result) == {"T: Shadow<Shadowed = T>"}

    def test_unsafe_trait_impl(self, driver):
        source = "#[shadow_impl]\nunsafe impl Send for Foo {}"
        assert expand_ok(driver, source).generated == "unsafe impl Send for ShadowFoo {}"


class TestAttributes:
    def test_other_attributes_preserved(self, driver):
        source = dedent("""\
            #[shadow_impl]
            #[allow(missing_docs)]
            impl Foo {
                pub fn bar() {}
            }""")
        result = expand_ok(driver, source)
        assert result.original == "#[allow(missing_docs)]\nimpl Foo {\n    pub fn bar() {}\n}"
        assert result.generated == "#[allow(missing_docs)]\nimpl ShadowFoo {\n    pub fn bar() {}\n}"

    def test_marker_after_other_attributes(self, driver):
        source = "/// Docs.\n#[shadow_impl]\nimpl Foo {}"
        result = expand_ok(driver, source)
        assert result.original == "/// Docs.\nimpl Foo {}"
        assert result.generated == "/// Docs.\nimpl ShadowFoo {}"

    def test_inline_marker(self, driver):
        result = expand_ok(driver, "#[shadow_impl] impl Foo {}")
        assert result.original == "impl Foo {}"
        assert result.output == "impl Foo {}\n\nimpl ShadowFoo {}\n"

    def test_path_qualified_marker(self, driver):
        source = "#[shadowgen::shadow_impl(transform_bounds(T))]\nimpl<T: Eq> Foo<T> {}"
        result = expand_ok(driver, source)
        assert unit_predicates(result) == {"T::Shadowed: Eq", "T: Shadow"}

    def test_empty_argument_list(self, driver):
        result = expand_ok(driver, "#[shadow_impl()]\nimpl Foo {}")
        assert result.generated == "impl ShadowFoo {}"

    def test_method_attributes_kept(self, driver):
        source = dedent("""\
            #[shadow_impl]
            impl Foo {
                /// Returns one.
                #[inline]
                #[shadow_method]
                pub fn one(&self) -> u8 {
                    1
                }
            }""")
        result = expand_ok(driver, source)
        assert "    /// Returns one.\n    #[inline]\n    pub fn one(&self) -> u8 {" in result.generated


class TestScopes:
    """The unit's and each method's directives stay separate"""

    def test_unit_directive_does_not_reach_methods(self, driver):
        source = dedent("""\
            #[shadow_impl(transform_bounds(T))]
            impl<T> Foo<T> {
                fn f(&self) where T: Clone {}
            }""")
        result = expand_ok(driver, source)
        assert unit_predicates(result) == {"T: Shadow"}
        assert method_predicates(result, "f") == {"T: Clone"}

    def test_method_directive_does_not_reach_siblings(self, driver):
        source = dedent("""\
            #[shadow_impl]
            impl<T> Foo<T> {
                #[shadow_method(transform_bounds(T))]
                fn f(&self) where T: Clone {}

                fn g(&self) where T: Clone {}
            }""")
        result = expand_ok(driver, source)
        assert unit_predicates(result) == set()
        assert result.unit.generics.where_clause is None
        assert method_predicates(result, "f") == {"T::Shadowed: Clone", "T: Shadow"}
        assert method_predicates(result, "g") == {"T: Clone"}

    def test_method_inline_bounds_normalized(self, driver):
        source = dedent("""\
            #[shadow_impl]
            impl<T> Foo<T> {
                #[shadow_method(transform_bounds(T))]
                fn f<U: Into<T>>(&self, u: U) {}
            }""")
        result = expand_ok(driver, source)
        assert "    fn f<U>(&self, u: U)\n    where\n        U: Into<T::Shadowed>,\n        T: Shadow,\n    {}" \
            in result.generated


class TestExpandWithArgs:
    """Marker arguments supplied separately from the item"""

    def test_expand(self, driver):
        item = "impl<T: Clone> Foo<T> {}"
        result = driver.expand("transform_bounds(T)", item)
        assert result.success
        assert result.original == item
        assert result.generated == "impl<T> ShadowFoo<T>\nwhere\n    T::Shadowed: Clone,\n    T: Shadow,\n{}"
        assert result.output == item + "\n\n" + result.generated + "\n"

    def test_empty_args(self, driver):
        result = driver.expand("", "impl Foo {}")
        assert result.success
        assert result.generated == "impl ShadowFoo {}"

    def test_deterministic(self, driver):
        item = "impl<R, T> Foo<R, T> where R: Clone, T: Clone {}"
        first = driver.expand("transform_bounds(T, R), add_bounds(R: Eq)", item)
        second = driver.expand("transform_bounds(T, R), add_bounds(R: Eq)", item)
        assert first.output == second.output
        assert first.generated == (
            "impl<R, T> ShadowFoo<R, T>\n"
            "where\n"
            "    R::Shadowed: Clone,\n"
            "    T::Shadowed: Clone,\n"
            "    T: Shadow,\n"
            "    R: Shadow,\n"
            "    R: Eq,\n"
            "{}"
        )
