"""Tests for the tree-sitter C# compilation model."""

from __future__ import annotations

from resxdupes.analyzers.tree_sitter import CSharpCompilation, render_documentation_xml
from tests._fixtures.solution_builder import resource_class


def _members(compilation: CSharpCompilation, metadata_name: str) -> dict:
    symbol = next(s for s in compilation.symbols if s.metadata_name == metadata_name)
    return {member.name: member for member in symbol.members}


def test_generated_accessor_members_and_documentation() -> None:
    compilation = CSharpCompilation.from_text(
        "Core",
        {"Strings.cs": resource_class("NS", "Strings", {"Greeting": "Hello"})},
    )

    members = _members(compilation, "NS.Strings")
    assert {"s_resourceManager", "ResourceManager", "Culture", "GetResourceString", "Greeting"} <= set(members)
    assert all(member.is_static for member in members.values())

    greeting = members["Greeting"]
    assert greeting.kind == "property"
    assert greeting.documentation_xml.startswith('<member name="P:NS.Strings.Greeting">\n')
    assert "<summary>Hello</summary>" in greeting.documentation_xml
    assert members["ResourceManager"].documentation_xml == ""


def test_file_scoped_namespace_and_nested_types() -> None:
    source = """
namespace Company.Product;

public class Outer
{
    internal static class Inner
    {
        /// <summary>Inner text</summary>
        public const string Key = "k";
    }
}
"""
    compilation = CSharpCompilation.from_text("Core", {"Outer.cs": source})

    names = [declaration.metadata_name for declaration in compilation.iter_type_declarations()]
    assert names == ["Company.Product.Outer", "Company.Product.Outer.Inner"]

    outer = _members(compilation, "Company.Product.Outer")
    assert outer["Inner"].kind == "type"
    assert outer["Inner"].is_static is True

    inner = _members(compilation, "Company.Product.Outer.Inner")
    assert inner["Key"].is_static is True
    assert inner["Key"].documentation_xml.startswith('<member name="F:Company.Product.Outer.Inner.Key">')


def test_partial_declarations_merge_into_one_symbol() -> None:
    first = """
namespace NS
{
    internal partial class Strings
    {
        internal static System.Resources.ResourceManager ResourceManager { get; }
    }
}
"""
    second = """
namespace NS
{
    internal partial class Strings
    {
        /// <summary>Bye</summary>
        internal static string Farewell { get; }
    }
}
"""
    compilation = CSharpCompilation.from_text("Core", {"A.cs": first, "B.cs": second})

    declarations = list(compilation.iter_type_declarations())
    assert [d.file_path for d in declarations] == ["A.cs", "B.cs"]
    symbols = {id(compilation.get_declared_symbol(d)) for d in declarations}
    assert len(symbols) == 1

    symbol = compilation.get_declared_symbol(declarations[0])
    assert symbol is not None
    assert {"ResourceManager", "Farewell"} <= symbol.member_names


def test_instance_members_methods_and_generic_arity() -> None:
    source = """
namespace NS
{
    public struct Cache<T>
    {
        /// <summary>Instance</summary>
        public string Label { get; set; }

        /// <summary>Formats a value</summary>
        public static string Format(string value, int count) => value;
    }
}
"""
    compilation = CSharpCompilation.from_text("Core", {"Cache.cs": source})

    declaration = next(iter(compilation.iter_type_declarations()))
    assert declaration.kind == "struct"
    assert declaration.metadata_name == "NS.Cache`1"

    members = _members(compilation, "NS.Cache`1")
    assert members["Label"].is_static is False
    assert members["Format"].kind == "method"
    assert members["Format"].documentation_xml.startswith(
        '<member name="M:NS.Cache`1.Format(System.String,System.Int32)">'
    )


def test_regular_comment_breaks_documentation_block() -> None:
    source = """
class Plain
{
    /// <summary>Detached</summary>
    // unrelated note
    static string Value;
}
"""
    compilation = CSharpCompilation.from_text("Core", {"Plain.cs": source})

    members = _members(compilation, "Plain")
    assert members["Value"].documentation_xml == ""


def test_render_documentation_xml_dedents_comment_lines() -> None:
    xml = render_documentation_xml("P:NS.T.Name", [" <summary>", "   Hello", " </summary>"])
    assert xml == '<member name="P:NS.T.Name">\n    <summary>\n      Hello\n    </summary>\n</member>\n'
    assert render_documentation_xml("P:NS.T.Name", ["   "]) == ""


def test_declarations_inside_conditional_compilation_are_collected() -> None:
    source = """
namespace NS
{
#if NET
    internal static class Strings
    {
        internal static System.Resources.ResourceManager ResourceManager { get; }

        /// <summary>Hello</summary>
        internal static string Greeting => "";

#if DEBUG
        /// <summary>Debug only</summary>
        internal static string DebugKey => "";
#else
        /// <summary>Release only</summary>
        internal static string ReleaseKey => "";
#endif
    }
#endif
}
"""
    compilation = CSharpCompilation.from_text("Core", {"Strings.cs": source})

    names = [declaration.metadata_name for declaration in compilation.iter_type_declarations()]
    assert names == ["NS.Strings"]

    members = _members(compilation, "NS.Strings")
    assert {"ResourceManager", "Greeting", "DebugKey", "ReleaseKey"} <= set(members)
    assert members["DebugKey"].documentation_xml.startswith('<member name="P:NS.Strings.DebugKey">')
    assert "<summary>Debug only</summary>" in members["DebugKey"].documentation_xml
    assert "<summary>Release only</summary>" in members["ReleaseKey"].documentation_xml


def test_operators_indexers_and_destructors_are_members() -> None:
    source = """
namespace NS
{
    public class Money
    {
        /// <summary>Adds</summary>
        public static Money operator +(Money left, Money right) => left;

        /// <summary>Negates</summary>
        public static Money operator -(Money value) => value;

        /// <summary>Converts</summary>
        public static implicit operator Money(int amount) => null;

        /// <summary>Indexed</summary>
        public string this[int index] => "";

        /// <summary>Finalizes</summary>
        ~Money() { }
    }
}
"""
    compilation = CSharpCompilation.from_text("Core", {"Money.cs": source})

    members = _members(compilation, "NS.Money")
    assert members["op_Addition"].is_static is True
    assert members["op_Addition"].documentation_xml.startswith('<member name="M:NS.Money.op_Addition(Money,Money)">')
    assert members["op_UnaryNegation"].documentation_xml.startswith(
        '<member name="M:NS.Money.op_UnaryNegation(Money)">'
    )
    assert members["op_Implicit"].documentation_xml.startswith(
        '<member name="M:NS.Money.op_Implicit(System.Int32)~Money">'
    )
    assert members["this[]"].is_static is False
    assert members["this[]"].documentation_xml.startswith('<member name="P:NS.Money.Item(System.Int32)">')
    assert members["Finalize"].documentation_xml.startswith('<member name="M:NS.Money.Finalize">')
