"""Tests for the Python extractor."""

from compaction.summary.extractors import ExtractorRegistry
from compaction.summary.model import ExtractionFailure, ExtractionSuccess

SOURCE = '''\
"""Order handling.

Longer description that is not rendered.
"""

from enum import Enum
from typing import Protocol, TypeAlias

__all__ = ["Order", "place"]

MAX_ITEMS: int = 10
_SECRET = "x"
OrderId: TypeAlias = int


class Status(Enum):
    """Lifecycle of an order."""

    OPEN = "open"
    CLOSED = "closed"


class Repository(Protocol):
    def get(self, order_id: OrderId) -> "Order": ...


@dataclass
class Order:
    """A customer order."""

    id: OrderId
    note: str = ""
    _cache: dict = {}

    def total(self) -> float:
        """Sum of line items."""
        return 0.0

    def _recalc(self) -> None:
        pass


async def place(order: Order) -> None:
    """Submit an order."""


def _helper():
    pass


if True:
    def hidden_by_condition():
        pass
'''


def _extract(extractors: ExtractorRegistry, source: str) -> ExtractionSuccess:
    outcome = extractors.extract("orders.py", source)
    assert isinstance(outcome, ExtractionSuccess), outcome
    return outcome


class TestPythonSummary:
    def test_purpose_is_module_docstring(self, extractors: ExtractorRegistry) -> None:
        summary = _extract(extractors, SOURCE).summary

        assert summary.purpose.startswith("Order handling.")

    def test_all_is_reexport(self, extractors: ExtractorRegistry) -> None:
        summary = _extract(extractors, SOURCE).summary

        assert summary.reexports == ['__all__ = ["Order", "place"]']

    def test_constants_and_aliases(self, extractors: ExtractorRegistry) -> None:
        summary = _extract(extractors, SOURCE).summary

        assert [(c.name, c.type) for c in summary.constants] == [("MAX_ITEMS", "int")]
        assert [a.definition for a in summary.type_aliases] == ["OrderId = int"]

    def test_enum_subclass(self, extractors: ExtractorRegistry) -> None:
        enum = _extract(extractors, SOURCE).summary.enums[0]

        assert enum.name == "Status"
        assert enum.doc == "Lifecycle of an order."
        assert enum.variants == ['OPEN = "open"', 'CLOSED = "closed"']

    def test_protocol_becomes_trait(self, extractors: ExtractorRegistry) -> None:
        trait = _extract(extractors, SOURCE).summary.traits[0]

        assert trait.name == "Repository"
        assert [m.name for m in trait.methods] == ["get"]

    def test_class_fields_methods_and_decorators(self, extractors: ExtractorRegistry) -> None:
        struct = _extract(extractors, SOURCE).summary.structs[0]

        assert struct.name == "Order"
        assert struct.derives == ["@dataclass"]
        assert [(f.name, f.type) for f in struct.fields] == [("id", "OrderId"), ("note", "str")]
        assert [m.name for m in struct.methods] == ["total"]
        assert struct.methods[0].doc == "Sum of line items."

    def test_only_public_module_level_functions(self, extractors: ExtractorRegistry) -> None:
        functions = _extract(extractors, SOURCE).summary.functions

        assert [f.name for f in functions] == ["place"]
        assert functions[0].is_async
        assert functions[0].signature == "async def place(order: Order) -> None"

    def test_rendered_text(self, extractors: ExtractorRegistry) -> None:
        text = _extract(extractors, SOURCE).text

        assert text.startswith('"""Order handling."""')
        assert "@dataclass\nclass Order:\n    \"\"\"A customer order.\"\"\"\n    id: OrderId" in text
        assert "# Submit an order.\nasync def place(order: Order) -> None\n    ..." in text
        assert "_helper" not in text
        assert "hidden_by_condition" not in text


class TestPythonEdgeCases:
    def test_type_statement_alias(self, extractors: ExtractorRegistry) -> None:
        summary = _extract(extractors, "type Pair[T] = tuple[T, T]\n").summary

        assert summary.type_aliases[0].name == "Pair"
        assert summary.type_aliases[0].definition == "type Pair[T] = tuple[T, T]"

    def test_docstring_truncated_to_max_doc_lines(self) -> None:
        extractors = ExtractorRegistry(max_doc_lines=2)
        source = 'def f():\n    """One.\n\n    Three.\n    Four.\n    """\n'

        function = _extract(extractors, source).summary.functions[0]

        assert function.doc == "One."

    def test_empty_class_renders_ellipsis(self, extractors: ExtractorRegistry) -> None:
        assert _extract(extractors, "class Marker:\n    pass\n").text == "class Marker:\n    ..."

    def test_syntax_error(self, extractors: ExtractorRegistry) -> None:
        outcome = extractors.extract("bad.py", "def broken(:\n    pass\n")

        assert isinstance(outcome, ExtractionFailure)
        assert outcome.error.startswith("Syntax error")
