"""Tests for the Rust extractor."""

from compaction.summary.extractors import ExtractorRegistry
from compaction.summary.model import ExtractionFailure, ExtractionSuccess


def _extract(extractors: ExtractorRegistry, source: str) -> ExtractionSuccess:
    outcome = extractors.extract("lib.rs", source)
    assert isinstance(outcome, ExtractionSuccess), outcome
    return outcome


class TestRustSummary:
    def test_struct_with_inherent_impl(self, extractors: ExtractorRegistry, rust_source: str) -> None:
        outcome = _extract(extractors, rust_source)

        assert outcome.text == "\n".join(
            [
                "// Purpose: Geometry helpers.",
                "",
                "/// A point in 2D space.",
                "#[derive(Debug, Clone)]",
                "pub struct Point {",
                "    pub x: f64,",
                "    pub y: f64,",
                "}",
                "impl Point {",
                "    pub fn new(x: f64, y: f64) -> Self;",
                "}",
            ]
        )

    def test_private_items_are_dropped(self, extractors: ExtractorRegistry, rust_source: str) -> None:
        summary = _extract(extractors, rust_source).summary

        assert summary.functions == []
        assert [f.name for f in summary.structs[0].fields] == ["x", "y"]
        assert [m.name for m in summary.structs[0].methods] == ["new"]

    def test_method_doc_is_kept_in_model(self, extractors: ExtractorRegistry, rust_source: str) -> None:
        method = _extract(extractors, rust_source).summary.structs[0].methods[0]

        assert method.doc == "Creates a point."

    def test_extraction_is_idempotent(self, extractors: ExtractorRegistry, rust_source: str) -> None:
        assert _extract(extractors, rust_source).text == _extract(extractors, rust_source).text


class TestRustImplLinkage:
    def test_trait_impl_methods_are_not_linked(self, extractors: ExtractorRegistry) -> None:
        source = """\
pub trait Shape {
    fn area(&self) -> f64;
}

pub struct Square {
    pub side: f64,
}

impl Shape for Square {
    fn area(&self) -> f64 {
        self.side * self.side
    }
}
"""
        summary = _extract(extractors, source).summary

        assert summary.structs[0].methods == []
        assert [m.name for m in summary.traits[0].methods] == ["area"]

    def test_generic_impl_links_by_bare_name(self, extractors: ExtractorRegistry) -> None:
        source = """\
pub struct Wrapper<T> {
    pub inner: T,
}

impl<T: Clone> Wrapper<T> {
    pub fn get(&self) -> T {
        self.inner.clone()
    }
}
"""
        struct = _extract(extractors, source).summary.structs[0]

        assert struct.generics == "<T>"
        assert [m.signature for m in struct.methods] == ["pub fn get(&self) -> T"]

    def test_impl_before_struct_is_linked(self, extractors: ExtractorRegistry) -> None:
        source = """\
impl Counter {
    pub fn bump(&mut self) {}
}

pub struct Counter {
    pub n: u32,
}
"""
        struct = _extract(extractors, source).summary.structs[0]

        assert [m.name for m in struct.methods] == ["bump"]


class TestRustItems:
    def test_enum_variants_and_derives(self, extractors: ExtractorRegistry) -> None:
        source = """\
/// Shapes we know.
#[derive(Debug)]
pub enum Shape {
    Circle { radius: f64 },
    Rect(f64, f64),
    Empty = 0,
}
"""
        enum = _extract(extractors, source).summary.enums[0]

        assert enum.name == "Shape"
        assert enum.doc == "Shapes we know."
        assert enum.derives == ["Debug"]
        assert enum.variants == ["Circle { radius: f64 }", "Rect(f64, f64)", "Empty = 0"]

    def test_trait_bounds_and_async_unsafe_flags(self, extractors: ExtractorRegistry) -> None:
        source = """\
pub trait Store: Send + Sync {
    async fn load(&self) -> Vec<u8>;
    unsafe fn raw(&self) -> *const u8;
}
"""
        trait = _extract(extractors, source).summary.traits[0]

        assert trait.bounds == "Send + Sync"
        assert trait.methods[0].is_async
        assert trait.methods[1].is_unsafe

    def test_constants_statics_and_aliases(self, extractors: ExtractorRegistry) -> None:
        source = """\
pub const MAX: usize = 10;
pub static NAME: &str = "x";
const HIDDEN: u8 = 1;
pub type Result<T> = std::result::Result<T, Error>;
"""
        summary = _extract(extractors, source).summary

        assert [(c.name, c.type, c.is_static) for c in summary.constants] == [
            ("MAX", "usize", False),
            ("NAME", "&str", True),
        ]
        assert summary.type_aliases[0].definition == "type Result<T> = std::result::Result<T, Error>;"

    def test_pub_use_and_inline_module(self, extractors: ExtractorRegistry) -> None:
        source = """\
pub use crate::inner::Thing;
use std::fmt;

pub mod nested {
    pub fn helper() {}
    fn hidden() {}
}
"""
        summary = _extract(extractors, source).summary

        assert summary.reexports == ["pub use crate::inner::Thing;", "pub mod nested;"]
        assert [f.name for f in summary.functions] == ["helper"]

    def test_where_clause_in_signature(self, extractors: ExtractorRegistry) -> None:
        source = "pub fn show<T>(value: T) -> String where T: Display {\n    value.to_string()\n}\n"

        function = _extract(extractors, source).summary.functions[0]

        assert function.signature == "pub fn show<T>(value: T) -> String where T: Display"


class TestRustFailures:
    def test_syntax_error_is_reported(self, extractors: ExtractorRegistry) -> None:
        outcome = extractors.extract("lib.rs", "pub fn broken( {\n")

        assert isinstance(outcome, ExtractionFailure)
        assert outcome.error.startswith("Syntax error at line 1")
