"""Tests for the C# AST parser module."""

from classloom.core.ast_parser import (
    collect_source_files,
    detect_language,
    is_excluded,
    parse_file,
    parse_source,
)
from classloom.core.ast_parser.csharp_parser import split_type_name


# =========================================================================
# Sample C# source fixtures
# =========================================================================

BLOCK_NAMESPACE = '''
using System;
using System.Collections.Generic;

namespace Shop.Models
{
    public class Order : EntityBase, IAuditable
    {
        private int _count;

        public List<OrderLine>? Lines { get; set; }

        protected decimal Total { get; }

        public Customer GetCustomer()
        {
            return null;
        }

        public Order() { }
    }
}
'''

FILE_SCOPED_NAMESPACE = '''
namespace Shop.Data;

public interface IOrderRepository
{
    Order Find(int id);
    IEnumerable<Order> All { get; }
}
'''

ENUM_SOURCE = '''
namespace Shop.Models
{
    public enum OrderStatus : byte
    {
        Open = 1,
        Shipped,
        Closed
    }
}
'''

RECORDS = '''
namespace Shop.Models
{
    public record Person(string Name, Address Home);

    public record struct Point(int X, int Y);

    public record Customer(string Name) : Person(Name, null);
}
'''

PARTIAL_AND_NESTED = '''
namespace Shop
{
    public partial class Cart
    {
        public class Item
        {
            public Product Product { get; set; }
        }

        public enum Mode { Quick, Full }
    }

    public struct Money { public decimal Amount { get; set; } }
}
'''

GENERIC_BASES = '''
public class UserRepository : Repository<User>, IRepository<User>, global::Shop.IUnitOfWork
{
}
'''

SYNTAX_ERROR_FILE = '''
public class Broken {
    public int X { get; set;
'''


# =========================================================================
# Tests: Language detection
# =========================================================================

class TestLanguageDetection:
    def test_csharp(self):
        assert detect_language("src/Order.cs") == "csharp"

    def test_unknown(self):
        assert detect_language("src/order.py") is None

    def test_case_insensitive(self):
        assert detect_language("ORDER.CS") == "csharp"


# =========================================================================
# Tests: Type declarations
# =========================================================================

class TestTypeDeclarations:
    def test_block_namespace_class(self):
        result = parse_source(BLOCK_NAMESPACE, "Order.cs")
        assert result.language == "csharp"
        assert len(result.fragments) == 1

        order = result.fragments[0]
        assert order.name == "Order"
        assert order.kind_text == "class"
        assert order.namespace == "Shop.Models"
        assert order.qualified_name == "Shop.Models.Order"
        assert order.modifiers == ["public"]
        assert [e.name for e in order.base_entries] == ["EntityBase", "IAuditable"]

    def test_members_exclude_fields_and_constructors(self):
        order = parse_source(BLOCK_NAMESPACE, "Order.cs").fragments[0]
        assert [(m.name, m.form) for m in order.members] == [
            ("Lines", "property"),
            ("Total", "property"),
            ("GetCustomer", "method"),
        ]

    def test_member_types_verbatim(self):
        order = parse_source(BLOCK_NAMESPACE, "Order.cs").fragments[0]
        lines, total, get_customer = order.members
        assert lines.type_text == "List<OrderLine>?"
        assert lines.modifiers == ["public"]
        assert total.type_text == "decimal"
        assert total.modifiers == ["protected"]
        assert get_customer.type_text == "Customer"

    def test_file_scoped_namespace_interface(self):
        result = parse_source(FILE_SCOPED_NAMESPACE, "IOrderRepository.cs")
        repo = result.fragments[0]
        assert repo.kind_text == "interface"
        assert repo.namespace == "Shop.Data"
        assert [(m.name, m.type_text) for m in repo.members] == [
            ("Find", "Order"),
            ("All", "IEnumerable<Order>"),
        ]
        assert repo.members[0].modifiers == []

    def test_enum_values(self):
        status = parse_source(ENUM_SOURCE, "OrderStatus.cs").fragments[0]
        assert status.kind_text == "enum"
        assert status.enum_values == ["Open", "Shipped", "Closed"]
        assert status.members == []

    def test_records(self):
        fragments = {f.name: f for f in parse_source(RECORDS, "Records.cs").fragments}
        person = fragments["Person"]
        assert person.kind_text == "record"
        assert [(m.name, m.type_text, m.modifiers) for m in person.members] == [
            ("Name", "string", ["public"]),
            ("Home", "Address", ["public"]),
        ]
        assert fragments["Point"].kind_text == "record struct"
        assert [e.name for e in fragments["Customer"].base_entries] == ["Person"]

    def test_partial_and_nested(self):
        fragments = parse_source(PARTIAL_AND_NESTED, "Cart.cs").fragments
        assert [f.qualified_name for f in fragments] == [
            "Shop.Cart", "Shop.Cart.Item", "Shop.Cart.Mode", "Shop.Money",
        ]
        cart, item, mode, money = fragments
        assert cart.is_partial
        assert not item.is_partial
        assert item.containing_types == ("Cart",)
        assert item.namespace == "Shop"
        assert mode.enum_values == ["Quick", "Full"]
        assert money.kind_text == "struct"

    def test_generic_and_qualified_bases(self):
        repo = parse_source(GENERIC_BASES, "UserRepository.cs").fragments[0]
        assert repo.namespace == ""
        assert [(e.name, e.text) for e in repo.base_entries] == [
            ("Repository", "Repository<User>"),
            ("IRepository", "IRepository<User>"),
            ("IUnitOfWork", "global::Shop.IUnitOfWork"),
        ]
        assert repo.base_entries[2].qualifier == "Shop"


# =========================================================================
# Tests: Errors
# =========================================================================

class TestErrors:
    def test_syntax_errors_still_parse(self):
        result = parse_source(SYNTAX_ERROR_FILE, "Broken.cs")
        assert any(e.severity == "warning" for e in result.errors)
        assert not result.failed

    def test_syntax_error_reports_line(self):
        result = parse_source(SYNTAX_ERROR_FILE, "Broken.cs")
        warning = result.errors[0]
        assert warning.line >= 2
        assert f"line {warning.line}" in warning.message

    def test_empty_file(self):
        result = parse_source("", "Empty.cs")
        assert result.fragments == []
        assert result.errors == []

    def test_missing_file(self, tmp_path):
        result = parse_file(str(tmp_path / "Missing.cs"))
        assert result.failed
        assert result.fragments == []

    def test_relative_path(self, tmp_path):
        path = tmp_path / "Order.cs"
        path.write_text(BLOCK_NAMESPACE)
        result = parse_file(str(path), str(tmp_path))
        assert result.file_path == "Order.cs"
        assert result.fragments[0].file_path == "Order.cs"


# =========================================================================
# Tests: Helpers
# =========================================================================

class TestHelpers:
    def test_split_type_name(self):
        assert split_type_name("System.Collections.Generic.IList<User>") == ("System.Collections.Generic", "IList")
        assert split_type_name("Repository<T>") == ("", "Repository")
        assert split_type_name("global::Shop.Cart") == ("Shop", "Cart")

    def test_collect_source_files(self, tmp_path):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "Order.cs").write_text("class Order {}")
        (tmp_path / "src" / "notes.md").write_text("# notes")
        (tmp_path / "bin").mkdir()
        (tmp_path / "bin" / "Generated.cs").write_text("class Generated {}")
        (tmp_path / "Migrations").mkdir()
        (tmp_path / "Migrations" / "Init.cs").write_text("class Init {}")

        files = collect_source_files(str(tmp_path), exclude=["Migrations"])
        assert [f.replace("\\", "/").rsplit("/", 2)[-2:] for f in files] == [["src", "Order.cs"]]

    def test_is_excluded(self):
        assert is_excluded("src/Migrations/Init.cs", ["Migrations"])
        assert is_excluded("src/Order.Designer.cs", ["*.Designer.cs"])
        assert not is_excluded("src/Order.cs", ["*.Designer.cs"])
