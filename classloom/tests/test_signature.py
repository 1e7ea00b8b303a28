"""Tests for signature analysis."""

import pytest

from classloom.core.graph_builder.signature import (
    SignatureAnalyzer,
    SignatureSyntaxError,
    analyze_signature,
    parse_signature,
)
from classloom.core.graph_builder.symbols import SymbolInfo


class _FakeResolver:
    def __init__(self, symbols):
        self._symbols = symbols

    def lookup(self, name, qualifier=""):
        return self._symbols.get(name)


# =========================================================================
# Tests: Unwrapping
# =========================================================================

class TestUnwrapping:
    def test_nested_generic_surfaces_innermost_name(self):
        info = analyze_signature("Dictionary<string, List<Foo>>")
        assert info.container_name == "Dictionary"
        assert info.dependencies == ["Foo"]

    def test_nullable_array(self):
        info = analyze_signature("TimingDose[]?")
        assert info.container_name is None
        assert info.dependencies == ["TimingDose"]

    def test_nullable_generic_keeps_container(self):
        info = analyze_signature("List<TimingDose>?")
        assert info.container_name == "List"
        assert info.dependencies == ["TimingDose"]

    def test_simple_identifier(self):
        assert analyze_signature("Medication?").dependencies == ["Medication"]

    def test_non_ascii_identifiers(self):
        assert analyze_signature("Größe").dependencies == ["Größe"]
        info = analyze_signature("Dictionary<Straße, Café?>")
        assert info.container_name == "Dictionary"
        assert info.dependencies == ["Straße", "Café"]

    def test_multidimensional_and_pointer(self):
        assert analyze_signature("Cell[,]").dependencies == ["Cell"]
        assert analyze_signature("Node*").dependencies == ["Node"]

    def test_order_preserved_and_deduplicated(self):
        info = analyze_signature("Dictionary<Foo, List<Bar>>")
        assert info.dependencies == ["Foo", "Bar"]

        info = analyze_signature("Dictionary<Foo, List<Foo?>>")
        assert info.dependencies == ["Foo"]

    def test_qualified_name_keeps_last_segment(self):
        assert analyze_signature("App.Models.Order").dependencies == ["Order"]
        assert analyze_signature("global::App.Models.Order").dependencies == ["Order"]

    def test_qualified_generic_container(self):
        info = analyze_signature("System.Collections.Generic.List<Order>")
        assert info.container_name == "List"
        assert info.dependencies == ["Order"]

    def test_tuple_elements(self):
        info = analyze_signature("(int Count, Order Last)")
        assert info.container_name is None
        assert info.dependencies == ["Order"]

    def test_tuple_inside_generic(self):
        info = analyze_signature("Task<(Order, Customer)>")
        assert info.container_name == "Task"
        assert info.dependencies == ["Order", "Customer"]

    def test_ref_return(self):
        assert analyze_signature("ref readonly Order").dependencies == ["Order"]

    def test_unbound_generic(self):
        info = analyze_signature("Dictionary<,>")
        assert info.container_name == "Dictionary"
        assert info.dependencies == []

    def test_generic_argument_on_qualifier(self):
        assert analyze_signature("Outer<Foo>.Inner").dependencies == ["Foo", "Inner"]


# =========================================================================
# Tests: Primitive filter
# =========================================================================

class TestPrimitives:
    @pytest.mark.parametrize("text", ["int", "string", "String", "bool", "void", "object", "Int32", "decimal"])
    def test_primitives_dropped(self, text):
        assert analyze_signature(text).dependencies == []

    def test_empty_signature(self):
        assert analyze_signature("") == (None, [])
        assert analyze_signature(None) == (None, [])

    def test_container_without_dependencies(self):
        info = analyze_signature("List<int>")
        assert info.container_name == "List"
        assert info.dependencies == []


# =========================================================================
# Tests: System namespace filter
# =========================================================================

class TestSystemFilter:
    def test_qualified_system_type_dropped(self):
        analyzer = SignatureAnalyzer(exclude_system=True)
        assert analyzer.analyze("System.IO.Stream").dependencies == []
        assert analyzer.analyze("List<Microsoft.Extensions.Options>").dependencies == []

    def test_qualified_match_is_segment_aware(self):
        analyzer = SignatureAnalyzer(exclude_system=True)
        assert analyzer.analyze("Systemic.Widget").dependencies == ["Widget"]

    def test_text_only_match_is_prefix_based(self):
        # Without a namespace, any name starting with a system prefix is dropped
        analyzer = SignatureAnalyzer(exclude_system=True)
        assert analyzer.analyze("SystemUser").dependencies == []
        assert analyzer.analyze("Order").dependencies == ["Order"]

    def test_resolver_namespace_wins_over_text(self):
        resolver = _FakeResolver({
            "SystemUser": SymbolInfo("SystemUser", "class", "App.Users", "App.Users.SystemUser"),
            "Clock": SymbolInfo("Clock", "class", "System.Time", "System.Time.Clock"),
        })
        analyzer = SignatureAnalyzer(exclude_system=True, resolver=resolver)
        assert analyzer.analyze("List<SystemUser>").dependencies == ["SystemUser"]
        assert analyzer.analyze("Clock").dependencies == []

    def test_filter_inactive_by_default(self):
        assert analyze_signature("System.IO.Stream").dependencies == ["Stream"]

    def test_custom_prefixes(self):
        analyzer = SignatureAnalyzer(exclude_system=True, system_namespaces=["Vendor"])
        assert analyzer.analyze("Vendor.Sdk.Client").dependencies == []
        assert analyzer.analyze("System.IO.Stream").dependencies == ["Stream"]


# =========================================================================
# Tests: Parsing
# =========================================================================

class TestParseSignature:
    def test_tree_shape(self):
        ref = parse_signature("List<Order>?")
        assert ref.kind == "nullable"
        inner = ref.args[0]
        assert inner.kind == "generic"
        assert inner.name == "List"
        assert inner.args[0].name == "Order"

    def test_verbatim_identifier(self):
        assert analyze_signature("@Event").dependencies == ["Event"]

    @pytest.mark.parametrize("text", ["List<Foo", "Foo>", "<Foo>", "Foo[", "(Foo, Bar"])
    def test_malformed_raises(self, text):
        with pytest.raises(SignatureSyntaxError):
            analyze_signature(text)

    def test_syntax_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_signature("   ")
