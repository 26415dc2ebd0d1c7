"""Tree-sitter powered C# compilation model."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence
from xml.sax.saxutils import quoteattr

import tree_sitter_c_sharp
from tree_sitter import Language, Parser

from .base import CompiledUnitProvider, TypeDeclaration
from ..logging import get_logger
from ..models import DeclaredType, MemberSymbol

CSHARP = Language(tree_sitter_c_sharp.language())

_TYPE_KINDS = {
    "class_declaration": "class",
    "struct_declaration": "struct",
    "record_declaration": "record",
    "record_struct_declaration": "struct",
    "interface_declaration": "interface",
    "enum_declaration": "enum",
}

_FIELD_KINDS = {
    "field_declaration": "field",
    "event_field_declaration": "event",
}

# Conditional-compilation branches; declarations inside them belong to the
# enclosing scope. Every branch is read since no symbols are defined.
_PREPROC_BRANCHES = ("preproc_if", "preproc_elif", "preproc_else")

_DOC_PREFIXES = {
    "field": "F",
    "event": "E",
}

_KEYWORD_TYPES = {
    "bool": "System.Boolean",
    "byte": "System.Byte",
    "sbyte": "System.SByte",
    "char": "System.Char",
    "decimal": "System.Decimal",
    "double": "System.Double",
    "float": "System.Single",
    "int": "System.Int32",
    "uint": "System.UInt32",
    "long": "System.Int64",
    "ulong": "System.UInt64",
    "short": "System.Int16",
    "ushort": "System.UInt16",
    "object": "System.Object",
    "string": "System.String",
    "nint": "System.IntPtr",
    "nuint": "System.UIntPtr",
}

_UNARY_OPERATORS = {
    "+": "op_UnaryPlus",
    "-": "op_UnaryNegation",
    "!": "op_LogicalNot",
    "~": "op_OnesComplement",
    "++": "op_Increment",
    "--": "op_Decrement",
    "true": "op_True",
    "false": "op_False",
}

_BINARY_OPERATORS = {
    "+": "op_Addition",
    "-": "op_Subtraction",
    "*": "op_Multiply",
    "/": "op_Division",
    "%": "op_Modulus",
    "&": "op_BitwiseAnd",
    "|": "op_BitwiseOr",
    "^": "op_ExclusiveOr",
    "<<": "op_LeftShift",
    ">>": "op_RightShift",
    ">>>": "op_UnsignedRightShift",
    "==": "op_Equality",
    "!=": "op_Inequality",
    "<": "op_LessThan",
    ">": "op_GreaterThan",
    "<=": "op_LessThanOrEqual",
    ">=": "op_GreaterThanOrEqual",
}


def _node_text(node, source_bytes: bytes) -> str:  # type: ignore[no-untyped-def]
    return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


def _modifiers(node, source_bytes: bytes) -> set[str]:  # type: ignore[no-untyped-def]
    return {
        _node_text(child, source_bytes).strip()
        for child in node.children
        if child.type == "modifier"
    }


def _name_of(node, source_bytes: bytes) -> str:  # type: ignore[no-untyped-def]
    name_node = node.child_by_field_name("name")
    if name_node is None:
        for child in node.children:
            if child.type == "identifier":
                name_node = child
                break
    if name_node is None:
        return ""
    # Verbatim identifiers (@Greeting) name the same symbol as their plain form.
    return _node_text(name_node, source_bytes).lstrip("@")


def _is_preproc_branch(node) -> bool:  # type: ignore[no-untyped-def]
    return node.type.startswith(_PREPROC_BRANCHES)


def _arity(node) -> int:  # type: ignore[no-untyped-def]
    for child in node.children:
        if child.type == "type_parameter_list":
            return sum(1 for param in child.named_children if param.type == "type_parameter")
    return 0


def _documentation_lines(node, source_bytes: bytes) -> List[str]:  # type: ignore[no-untyped-def]
    """Collect the `///` (or `/** */`) comment block directly above a declaration."""
    lines: List[str] = []
    sibling = node.prev_sibling
    while sibling is not None and sibling.type == "comment":
        text = _node_text(sibling, source_bytes)
        if text.startswith("///") and not text.startswith("////"):
            lines.insert(0, text[3:])
        elif text.startswith("/**") and not text.startswith("/**/"):
            body = text[3:-2] if text.endswith("*/") else text[3:]
            block = [line.strip().removeprefix("*") for line in body.splitlines()]
            lines[:0] = block
        else:
            break
        sibling = sibling.prev_sibling
    return lines


def render_documentation_xml(doc_id: str, lines: Sequence[str]) -> str:
    """Render comment lines the way the compiler reports member documentation."""
    if not lines or not any(line.strip() for line in lines):
        return ""
    body = textwrap.dedent("\n".join(line.rstrip() for line in lines)).strip("\n")
    return f"<member name={quoteattr(doc_id)}>\n{textwrap.indent(body, '    ')}\n</member>\n"


def _type_id(node, source_bytes: bytes) -> str:  # type: ignore[no-untyped-def]
    text = "".join(_node_text(node, source_bytes).split())
    text = _KEYWORD_TYPES.get(text, text)
    return text.replace("<", "{").replace(">", "}")


def _operator_token(node, source_bytes: bytes) -> str:  # type: ignore[no-untyped-def]
    token = node.child_by_field_name("operator")
    if token is not None:
        return _node_text(token, source_bytes).strip()
    after_keyword = False
    for child in node.children:
        if after_keyword and child.type != "checked":
            return _node_text(child, source_bytes).strip()
        after_keyword = after_keyword or child.type == "operator"
    return ""


def _parameter_types(node, source_bytes: bytes) -> List[str]:  # type: ignore[no-untyped-def]
    parameters = node.child_by_field_name("parameters")
    if parameters is None:
        return []
    types: List[str] = []
    for param in parameters.named_children:
        if param.type != "parameter":
            continue
        type_node = param.child_by_field_name("type")
        if type_node is None:
            continue
        types.append(_type_id(type_node, source_bytes))
    return types


class CSharpCompilation(CompiledUnitProvider):
    """Declared types of one project build, merged across partial declarations."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.syntax_trees: List[str] = []
        self._declarations: List[TypeDeclaration] = []
        self._symbols: Dict[str, DeclaredType] = {}
        self._logger = get_logger("compilation")

    @classmethod
    def from_sources(cls, name: str, sources: Iterable[Path]) -> "CSharpCompilation":
        compilation = cls(name)
        parser = Parser(CSHARP)
        for path in sources:
            try:
                source_bytes = path.read_bytes()
            except OSError as exc:
                compilation._logger.warning("Skipping unreadable source %s: %s", path, exc)
                continue
            compilation.add_source(str(path), source_bytes, parser=parser)
        return compilation

    @classmethod
    def from_text(cls, name: str, files: Dict[str, str]) -> "CSharpCompilation":
        compilation = cls(name)
        parser = Parser(CSHARP)
        for file_path, text in files.items():
            compilation.add_source(file_path, text.encode("utf-8"), parser=parser)
        return compilation

    def add_source(self, file_path: str, source_bytes: bytes, *, parser: Parser | None = None) -> None:
        parser = parser or Parser(CSHARP)
        tree = parser.parse(source_bytes)
        self._logger.debug("Getting symbols for '%s'", file_path)
        self.syntax_trees.append(file_path)
        self._collect_scope(tree.root_node, source_bytes, "", file_path)

    def iter_type_declarations(self) -> Iterable[TypeDeclaration]:
        return iter(self._declarations)

    def get_declared_symbol(self, declaration: TypeDeclaration) -> Optional[DeclaredType]:
        return self._symbols.get(declaration.metadata_name)

    @property
    def symbols(self) -> List[DeclaredType]:
        return list(self._symbols.values())

    def _collect_scope(self, node, source_bytes: bytes, namespace: str, file_path: str) -> None:  # type: ignore[no-untyped-def]
        current = namespace
        for child in node.children:
            if child.type == "namespace_declaration":
                inner = self._join(namespace, _node_text(child.child_by_field_name("name"), source_bytes))
                body = child.child_by_field_name("body")
                if body is not None:
                    self._collect_scope(body, source_bytes, inner, file_path)
            elif child.type == "file_scoped_namespace_declaration":
                # Declarations after a file-scoped namespace belong to it, whether the
                # grammar nests them or leaves them as siblings.
                current = self._join(namespace, _node_text(child.child_by_field_name("name"), source_bytes))
                self._collect_scope(child, source_bytes, current, file_path)
            elif child.type in _TYPE_KINDS:
                self._collect_type(child, source_bytes, current, file_path)
            elif _is_preproc_branch(child):
                self._collect_scope(child, source_bytes, current, file_path)

    def _collect_type(self, node, source_bytes: bytes, container: str, file_path: str) -> str:  # type: ignore[no-untyped-def]
        name = _name_of(node, source_bytes)
        arity = _arity(node)
        metadata_name = self._join(container, f"{name}`{arity}" if arity else name)
        kind = _TYPE_KINDS[node.type]
        if node.type == "record_declaration" and any(child.type == "struct" for child in node.children):
            kind = "struct"

        self._declarations.append(TypeDeclaration(kind=kind, metadata_name=metadata_name, file_path=file_path))
        symbol = self._symbols.get(metadata_name)
        if symbol is None:
            symbol = DeclaredType(metadata_name=metadata_name, kind=kind)
            self._symbols[metadata_name] = symbol

        body = node.child_by_field_name("body")
        if body is None:
            for child in node.children:
                if child.type == "declaration_list":
                    body = child
                    break
        if body is None or node.type == "enum_declaration":
            return metadata_name

        for member in body.children:
            symbol.members.extend(self._collect_members(member, source_bytes, metadata_name, file_path))
        return metadata_name

    def _collect_members(self, node, source_bytes: bytes, type_name: str, file_path: str) -> Iterable[MemberSymbol]:  # type: ignore[no-untyped-def]
        if not node.is_named or node.type == "comment":
            return
        if _is_preproc_branch(node):
            for child in node.children:
                yield from self._collect_members(child, source_bytes, type_name, file_path)
            return
        modifiers = _modifiers(node, source_bytes)
        doc_lines = _documentation_lines(node, source_bytes)

        if node.type in _TYPE_KINDS:
            nested = self._collect_type(node, source_bytes, type_name, file_path)
            yield self._member(_name_of(node, source_bytes), "type", "static" in modifiers, f"T:{nested}", doc_lines)
        elif node.type in _FIELD_KINDS:
            kind = _FIELD_KINDS[node.type]
            is_static = bool(modifiers & {"static", "const"})
            for declaration in node.named_children:
                if declaration.type != "variable_declaration":
                    continue
                for declarator in declaration.named_children:
                    if declarator.type != "variable_declarator":
                        continue
                    name = _name_of(declarator, source_bytes)
                    if name:
                        yield self._member(name, kind, is_static, f"{_DOC_PREFIXES[kind]}:{type_name}.{name}", doc_lines)
        elif node.type == "property_declaration":
            name = _name_of(node, source_bytes)
            if name:
                yield self._member(name, "property", "static" in modifiers, f"P:{type_name}.{name}", doc_lines)
        elif node.type == "event_declaration":
            name = _name_of(node, source_bytes)
            if name:
                yield self._member(name, "event", "static" in modifiers, f"E:{type_name}.{name}", doc_lines)
        elif node.type == "method_declaration":
            name = _name_of(node, source_bytes)
            if name:
                arity = _arity(node)
                doc_name = f"{name}``{arity}" if arity else name
                params = _parameter_types(node, source_bytes)
                signature = f"({','.join(params)})" if params else ""
                yield self._member(
                    name, "method", "static" in modifiers, f"M:{type_name}.{doc_name}{signature}", doc_lines
                )
        elif node.type == "constructor_declaration":
            is_static = "static" in modifiers
            params = _parameter_types(node, source_bytes)
            signature = f"({','.join(params)})" if params else ""
            doc_name = "#cctor" if is_static else f"#ctor{signature}"
            yield self._member(
                ".cctor" if is_static else ".ctor", "constructor", is_static, f"M:{type_name}.{doc_name}", doc_lines
            )
        elif node.type == "destructor_declaration":
            yield self._member("Finalize", "method", False, f"M:{type_name}.Finalize", doc_lines)
        elif node.type == "indexer_declaration":
            params = _parameter_types(node, source_bytes)
            yield self._member(
                "this[]", "property", "static" in modifiers, f"P:{type_name}.Item({','.join(params)})", doc_lines
            )
        elif node.type == "operator_declaration":
            params = _parameter_types(node, source_bytes)
            table = _UNARY_OPERATORS if len(params) == 1 else _BINARY_OPERATORS
            name = table.get(_operator_token(node, source_bytes), "")
            if name:
                yield self._member(name, "method", True, f"M:{type_name}.{name}({','.join(params)})", doc_lines)
        elif node.type == "conversion_operator_declaration":
            name = "op_Implicit" if any(child.type == "implicit" for child in node.children) else "op_Explicit"
            params = _parameter_types(node, source_bytes)
            type_node = node.child_by_field_name("type")
            target = f"~{_type_id(type_node, source_bytes)}" if type_node is not None else ""
            yield self._member(
                name, "method", True, f"M:{type_name}.{name}({','.join(params)}){target}", doc_lines
            )

    @staticmethod
    def _member(name: str, kind: str, is_static: bool, doc_id: str, doc_lines: Sequence[str]) -> MemberSymbol:
        return MemberSymbol(
            name=name,
            kind=kind,
            is_static=is_static,
            documentation_xml=render_documentation_xml(doc_id, doc_lines),
        )

    @staticmethod
    def _join(container: str, name: str) -> str:
        name = "".join(name.split())
        return f"{container}.{name}" if container else name


__all__ = ["CSHARP", "CSharpCompilation", "render_documentation_xml"]
