"""TypeScript / JavaScript extractor (``.ts``, ``.tsx``, ``.js``, ``.jsx``).

Visibility is the ``export`` marker. Docs are JSDoc ``/** */`` blocks; for an
exported declaration the doc sits above the ``export`` statement, not the
declaration node. Namespaces are flattened into the file's lists and the
namespace itself is recorded as a re-export entry.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import TYPE_CHECKING

from compaction.summary.extractors.base import (
    BaseExtractor,
    Handler,
    Walk,
    node_has_token,
    strip_block_comment,
)
from compaction.summary.model import (
    ConstantSummary,
    EnumSummary,
    FieldSummary,
    FunctionSummary,
    StructSummary,
    TraitSummary,
    TypeAliasSummary,
)
from compaction.summary.parsing import children_of_type, first_child_of_type
from compaction.summary.render.typescript import TypeScriptRenderer

if TYPE_CHECKING:
    from tree_sitter import Node

_HIDDEN_ACCESS = ("private", "protected")
_METHOD_MODIFIERS = ("static", "abstract", "async", "get", "set", "readonly", "override_modifier")
# Statement wrappers whose children may hold exported declarations
_TRANSPARENT = ("expression_statement", "ambient_declaration", "statement_block")
# Anonymous values of `export default`
_DEFAULT_CALLABLES = ("function_expression", "function", "generator_function", "arrow_function")


class TypeScriptKind(StrEnum):
    EXPORT = "export_statement"
    CLASS = "class_declaration"
    ABSTRACT_CLASS = "abstract_class_declaration"
    CLASS_EXPRESSION = "class"
    INTERFACE = "interface_declaration"
    TYPE_ALIAS = "type_alias_declaration"
    ENUM = "enum_declaration"
    FUNCTION = "function_declaration"
    FUNCTION_SIGNATURE = "function_signature"
    GENERATOR = "generator_function_declaration"
    LEXICAL = "lexical_declaration"
    VARIABLE = "variable_declaration"
    NAMESPACE = "internal_module"
    MODULE = "module"


def _jsdoc(text: str) -> str | None:
    text = text.strip()
    if text.startswith("/**") and not text.startswith("/***"):
        return strip_block_comment(text)
    return None


def _annotation(text: str) -> str:
    """``: string`` -> ``string``."""
    return text.lstrip(":").strip()


def _export_statement(node: Node) -> Node | None:
    parent = node.parent
    if parent is not None and parent.type == "ambient_declaration":
        parent = parent.parent
    if parent is not None and parent.type == TypeScriptKind.EXPORT:
        return parent
    return None


def _is_hidden_member(node: Node, walk: Walk) -> bool:
    access = first_child_of_type(node, "accessibility_modifier")
    if access is not None and walk.text(access) in _HIDDEN_ACCESS:
        return True
    name = node.child_by_field_name("name")
    return name is not None and (name.type == "private_property_identifier" or walk.text(name).startswith("#"))


class TypeScriptExtractor(BaseExtractor):
    family = "typescript"
    NodeKind = TypeScriptKind
    renderer = TypeScriptRenderer()

    def handlers(self) -> Mapping[StrEnum, Handler]:
        return {
            TypeScriptKind.EXPORT: self._export,
            TypeScriptKind.CLASS: self._class,
            TypeScriptKind.ABSTRACT_CLASS: self._class,
            TypeScriptKind.CLASS_EXPRESSION: self._class,
            TypeScriptKind.INTERFACE: self._interface,
            TypeScriptKind.TYPE_ALIAS: self._type_alias,
            TypeScriptKind.ENUM: self._enum,
            TypeScriptKind.FUNCTION: self._function,
            TypeScriptKind.FUNCTION_SIGNATURE: self._function,
            TypeScriptKind.GENERATOR: self._function,
            TypeScriptKind.LEXICAL: self._variables,
            TypeScriptKind.VARIABLE: self._variables,
            TypeScriptKind.NAMESPACE: self._namespace,
            TypeScriptKind.MODULE: self._namespace,
        }

    def visit_default(self, node: Node, walk: Walk) -> None:
        if node.type in _TRANSPARENT:
            self.visit_children(node, walk)

    def extract_purpose(self, root: Node, walk: Walk) -> str | None:
        first = root.named_children[0] if root.named_children else None
        if first is None or first.type != "comment":
            return None
        doc = _jsdoc(walk.text(first))
        if doc is not None:
            walk.purpose_nodes.add(first.start_byte)
        return doc

    # -- Helpers ------------------------------------------------------------

    def _doc(self, node: Node, walk: Walk) -> str | None:
        anchor = _export_statement(node) or node
        return self.doc_comment(
            anchor, walk, comment_types=("comment",), clean=_jsdoc, skip_types=("decorator",)
        )

    def _name(self, node: Node, walk: Walk) -> str:
        name = walk.field_text(node, "name")
        if not name and _export_statement(node) is not None:
            return "default"
        return name

    def _callable(self, node: Node, walk: Walk, head: str) -> str:
        sig = head + walk.field_text(node, "type_parameters")
        sig += walk.field_text(node, "parameters") or f"({walk.field_text(node, 'parameter')})"
        ret = _annotation(walk.field_text(node, "return_type"))
        if ret:
            sig += f": {ret}"
        return sig

    def _member_signature(self, node: Node, walk: Walk) -> FunctionSummary | None:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return None
        modifiers = [
            walk.text(child)
            for child in node.children
            if child.start_byte < name_node.start_byte and child.type in _METHOD_MODIFIERS
        ]
        name = walk.text(name_node)
        if node_has_token(node, "*"):
            name = "*" + name
        if node_has_token(node, "?"):
            name += "?"
        return FunctionSummary(
            name=walk.text(name_node),
            signature=self._callable(node, walk, " ".join([*modifiers, name])),
            doc=self._doc(node, walk),
            is_async="async" in modifiers,
        )

    def _decorators(self, node: Node, walk: Walk) -> list[str]:
        found = [walk.text(d) for d in children_of_type(node, "decorator")]
        export = _export_statement(node)
        if export is not None:
            found = [walk.text(d) for d in children_of_type(export, "decorator")] + found
        return found

    # -- Handlers -----------------------------------------------------------

    def _export(self, node: Node, walk: Walk) -> None:
        if node.child_by_field_name("source") is not None:
            walk.summary.reexports.append(walk.text(node))
            return
        target = node.child_by_field_name("declaration") or node.child_by_field_name("value")
        if target is None:
            return
        if target.type in _DEFAULT_CALLABLES:
            self._default_callable(target, walk)
        else:
            self.visit(target, walk)

    def _class(self, node: Node, walk: Walk) -> None:
        if _export_statement(node) is None:
            return
        fields: list[FieldSummary] = []
        methods: list[FunctionSummary] = []
        body = node.child_by_field_name("body")
        for member in body.named_children if body is not None else []:
            if member.type == "decorator" or _is_hidden_member(member, walk):
                continue
            if member.type in ("public_field_definition", "field_definition"):
                name = walk.field_text(member, "name") or walk.field_text(member, "property")
                if not name:
                    continue
                fields.append(
                    FieldSummary(
                        name=name,
                        type=_annotation(walk.field_text(member, "type")) or "any",
                        doc=self._doc(member, walk),
                    )
                )
            elif member.type in ("method_definition", "method_signature", "abstract_method_signature"):
                method = self._member_signature(member, walk)
                if method is not None:
                    methods.append(method)

        generics = walk.field_text(node, "type_parameters")
        heritage = first_child_of_type(node, "class_heritage")
        if heritage is not None:
            generics += f" {walk.text(heritage)}"
        derives = self._decorators(node, walk)
        if node.type == TypeScriptKind.ABSTRACT_CLASS:
            derives.append("abstract")
        walk.summary.structs.append(
            StructSummary(
                name=self._name(node, walk),
                doc=self._doc(node, walk),
                generics=generics,
                fields=fields,
                methods=methods,
                derives=derives,
            )
        )

    def _interface(self, node: Node, walk: Walk) -> None:
        if _export_statement(node) is None:
            return
        methods: list[FunctionSummary] = []
        body = node.child_by_field_name("body")
        for member in body.named_children if body is not None else []:
            if member.type == "method_signature":
                method = self._member_signature(member, walk)
                if method is not None:
                    methods.append(method)
            elif member.type == "property_signature":
                name = walk.field_text(member, "name")
                prop_type = _annotation(walk.field_text(member, "type"))
                if not name or not prop_type:
                    continue
                if node_has_token(member, "?"):
                    name += "?"
                prefix = "readonly " if node_has_token(member, "readonly") else ""
                methods.append(
                    FunctionSummary(
                        name=walk.field_text(member, "name"),
                        signature=f"{prefix}{name}: {prop_type}",
                        doc=self._doc(member, walk),
                    )
                )
        extends = first_child_of_type(node, "extends_type_clause")
        bounds = walk.text(extends).removeprefix("extends").strip() if extends is not None else ""
        walk.summary.traits.append(
            TraitSummary(
                name=walk.field_text(node, "name"),
                doc=self._doc(node, walk),
                generics=walk.field_text(node, "type_parameters"),
                bounds=bounds,
                methods=methods,
            )
        )

    def _type_alias(self, node: Node, walk: Walk) -> None:
        name = walk.field_text(node, "name")
        value = walk.field_text(node, "value")
        if _export_statement(node) is None or not name or not value:
            return
        generics = walk.field_text(node, "type_parameters")
        walk.summary.type_aliases.append(
            TypeAliasSummary(
                name=name,
                definition=f"type {name}{generics} = {value}",
                doc=self._doc(node, walk),
            )
        )

    def _enum(self, node: Node, walk: Walk) -> None:
        if _export_statement(node) is None:
            return
        variants: list[str] = []
        body = node.child_by_field_name("body")
        for member in body.named_children if body is not None else []:
            if member.type == "enum_assignment":
                name = walk.field_text(member, "name") or walk.text(member.named_children[0])
                variants.append(f"{name} = {walk.field_text(member, 'value')}")
            elif member.type in ("property_identifier", "string"):
                variants.append(walk.text(member))
        walk.summary.enums.append(
            EnumSummary(name=walk.field_text(node, "name"), doc=self._doc(node, walk), variants=variants)
        )

    def _function(self, node: Node, walk: Walk) -> None:
        if _export_statement(node) is None:
            return
        is_async = node_has_token(node, "async")
        keyword = "function*" if node.type == TypeScriptKind.GENERATOR or node_has_token(node, "*") else "function"
        head = f"{'async ' if is_async else ''}{keyword} {self._name(node, walk)}"
        walk.summary.functions.append(
            FunctionSummary(
                name=self._name(node, walk),
                signature=self._callable(node, walk, head),
                doc=self._doc(node, walk),
                is_async=is_async,
            )
        )

    def _default_callable(self, node: Node, walk: Walk) -> None:
        is_async = node_has_token(node, "async")
        keyword = "function*" if node_has_token(node, "*") else "function"
        head = f"default {'async ' if is_async else ''}{keyword}"
        walk.summary.functions.append(
            FunctionSummary(
                name="default",
                signature=self._callable(node, walk, head),
                doc=self._doc(node, walk),
                is_async=is_async,
            )
        )

    def _variables(self, node: Node, walk: Walk) -> None:
        if _export_statement(node) is None:
            return
        doc = self._doc(node, walk)
        for declarator in children_of_type(node, "variable_declarator"):
            name = walk.field_text(declarator, "name")
            if not name:
                continue
            value = declarator.child_by_field_name("value")
            if value is not None and value.type == "arrow_function":
                is_async = node_has_token(value, "async")
                params = walk.field_text(value, "parameters") or f"({walk.field_text(value, 'parameter')})"
                ret = _annotation(walk.field_text(value, "return_type"))
                sig = f"const {name} = {'async ' if is_async else ''}{params}"
                if ret:
                    sig += f": {ret}"
                walk.summary.functions.append(
                    FunctionSummary(name=name, signature=f"{sig} => ...", doc=doc, is_async=is_async)
                )
            else:
                walk.summary.constants.append(
                    ConstantSummary(
                        name=name,
                        type=_annotation(walk.field_text(declarator, "type")) or "any",
                        doc=doc,
                    )
                )

    def _namespace(self, node: Node, walk: Walk) -> None:
        keyword = "module" if node.type == TypeScriptKind.MODULE else "namespace"
        prefix = "export " if _export_statement(node) is not None else ""
        walk.summary.reexports.append(f"{prefix}{keyword} {walk.field_text(node, 'name')}")
        body = node.child_by_field_name("body")
        if body is not None:
            self.visit_children(body, walk)
