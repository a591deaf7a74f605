"""Tests for the TypeScript / JavaScript extractor."""

import pytest

from compaction.summary.extractors import ExtractorRegistry
from compaction.summary.model import ExtractionFailure, ExtractionSuccess

SOURCE = """\
/** Math utilities. */

import { x } from "./x";
export { helper } from "./helper";

/** Max value. */
export const MAX: number = 100;

export const add = (a: number, b: number): number => a + b;

/** Shape kinds. */
export enum Kind {
  Circle,
  Square = 2,
}

export interface Shape extends Base {
  readonly name: string;
  area(): number;
  label?: string;
}

export type Id = string | number;

/** A circle. */
export class Circle implements Shape {
  readonly name: string = "circle";
  private secret: number = 1;
  #hidden = 2;
  constructor(public radius: number) {}
  area(): number {
    return 0;
  }
  static unit(): Circle {
    return new Circle(1);
  }
  protected internal(): void {}
}

export async function load(path: string): Promise<string> {
  return "";
}

function notExported() {}

export namespace Geometry {
  export function scale(n: number): number {
    return n;
  }
}
"""


@pytest.fixture
def summary(extractors: ExtractorRegistry):
    outcome = extractors.extract("shapes.ts", SOURCE)
    assert isinstance(outcome, ExtractionSuccess), outcome
    return outcome.summary


class TestTypeScriptSummary:
    def test_purpose(self, summary) -> None:
        assert summary.purpose == "Math utilities."

    def test_reexports_and_namespace(self, summary) -> None:
        assert summary.reexports == ['export { helper } from "./helper";', "export namespace Geometry"]

    def test_constants_with_doc(self, summary) -> None:
        assert [(c.name, c.type, c.doc) for c in summary.constants] == [("MAX", "number", "Max value.")]

    def test_arrow_function_constant_is_a_function(self, summary) -> None:
        add = next(f for f in summary.functions if f.name == "add")

        assert add.signature == "const add = (a: number, b: number): number => ..."

    def test_enum(self, summary) -> None:
        enum = summary.enums[0]

        assert enum.name == "Kind"
        assert enum.doc == "Shape kinds."
        assert enum.variants == ["Circle", "Square = 2"]

    def test_interface(self, summary) -> None:
        trait = summary.traits[0]

        assert trait.name == "Shape"
        assert trait.bounds == "Base"
        assert [m.signature for m in trait.methods] == [
            "readonly name: string",
            "area(): number",
            "label?: string",
        ]

    def test_type_alias(self, summary) -> None:
        assert summary.type_aliases[0].definition == "type Id = string | number"

    def test_class_members_respect_access(self, summary) -> None:
        struct = summary.structs[0]

        assert struct.name == "Circle"
        assert struct.doc == "A circle."
        assert [f.name for f in struct.fields] == ["name"]
        assert [m.signature for m in struct.methods] == [
            "constructor(public radius: number)",
            "area(): number",
            "static unit(): Circle",
        ]

    def test_functions(self, summary) -> None:
        names = [f.name for f in summary.functions]

        assert names == ["add", "load", "scale"]
        load = summary.functions[1]
        assert load.is_async
        assert load.signature == "async function load(path: string): Promise<string>"


class TestTypeScriptRendering:
    def test_class_header_carries_heritage(self, extractors: ExtractorRegistry) -> None:
        outcome = extractors.extract("shapes.ts", SOURCE)

        assert "export class Circle implements Shape {" in outcome.text
        assert "notExported" not in outcome.text
        assert "secret" not in outcome.text

    def test_tsx_uses_tsx_grammar(self, extractors: ExtractorRegistry) -> None:
        source = "export function App(): JSX.Element {\n  return <div>hi</div>;\n}\n"

        outcome = extractors.extract("App.tsx", source)

        assert isinstance(outcome, ExtractionSuccess)
        assert outcome.summary.functions[0].name == "App"

    def test_syntax_error(self, extractors: ExtractorRegistry) -> None:
        outcome = extractors.extract("bad.ts", "export function (\n")

        assert isinstance(outcome, ExtractionFailure)


class TestTypeScriptDefaultExports:
    def test_anonymous_default_function(self, extractors: ExtractorRegistry) -> None:
        source = "/** Doubles a number. */\nexport default function (x: number): number {\n  return x * 2;\n}\n"

        outcome = extractors.extract("double.ts", source)

        assert isinstance(outcome, ExtractionSuccess)
        function = outcome.summary.functions[0]
        assert (function.name, function.doc) == ("default", "Doubles a number.")
        assert function.signature == "default function(x: number): number"
        assert "export default function(x: number): number;" in outcome.text

    def test_default_arrow_function(self, extractors: ExtractorRegistry) -> None:
        outcome = extractors.extract("identity.js", "export default (x) => x;\n")

        assert isinstance(outcome, ExtractionSuccess)
        assert [f.name for f in outcome.summary.functions] == ["default"]
        assert outcome.text == "export default function(x);"

    def test_default_async_arrow(self, extractors: ExtractorRegistry) -> None:
        outcome = extractors.extract("load.ts", "export default async (path: string) => path;\n")

        assert isinstance(outcome, ExtractionSuccess)
        function = outcome.summary.functions[0]
        assert function.is_async
        assert function.signature == "default async function(path: string)"


class TestTypeScriptDecoratedMembers:
    def test_doc_above_decorator_is_kept(self, extractors: ExtractorRegistry) -> None:
        source = (
            "export class Service {\n"
            "  /** Doc m */\n"
            "  @dec()\n"
            "  m(): void {}\n"
            "  /** Doc n */\n"
            "  n(): void {}\n"
            "}\n"
        )

        outcome = extractors.extract("service.ts", source)

        assert isinstance(outcome, ExtractionSuccess)
        methods = outcome.summary.structs[0].methods
        assert [(m.name, m.doc) for m in methods] == [("m", "Doc m"), ("n", "Doc n")]
