"""
Form registry tests

Tests token cleaning, the built-in import/export/toplevel handlers, and
registry extension.
"""

import pytest

from asinclude.lib.forms import FormRegistry, token_clean, tokens_clean, keywordParts_parse, keywordJoin_format
from asinclude.lib.errors import UnknownFormError
from asinclude.models.forms import FormSpec, FormCategory


class TestTokenCleaning:
    """Test the clean-token view of raw tokens"""

    def test_strips_commas_and_whitespace(self):
        assert token_clean(" os, ") == "os"

    def test_strips_closing_parentheses(self):
        assert token_clean("join))") == "join"

    def test_strips_trailing_comment(self):
        """A line comment after the form is not part of any token"""
        assert token_clean("path))  # qualified name") == "path"

    def test_keeps_opening_parentheses_and_marker(self):
        """Nested form openings survive cleaning so toplevel can split on them"""
        assert token_clean("($(Expr(") == "($(Expr("

    def test_empty_tokens_kept_in_position(self):
        assert tokens_clean(["a, ", " ", "b)"]) == ["a", "", "b"]


class TestImportForm:
    """Test import reconstruction"""

    def test_operands_only(self):
        """import("os", "path", "join") gives a dotted import"""
        handler = FormRegistry().handler_get("import")
        assert handler("os", "path", "join") == "import os.path.join"

    def test_raw_tokens_with_form_name(self):
        """Raw tokens as split from a corrupted line start with the form name"""
        handler = FormRegistry().handler_get("import")
        assert handler("import, ", "os, ", "path, ", "join))") == "import os.path.join"

    def test_single_name(self):
        handler = FormRegistry().handler_get("import")
        assert handler("import, ", "collections))") == "import collections"

    def test_empty_tokens_dropped(self):
        handler = FormRegistry().handler_get("import")
        assert handler("import, ", " ", "os, ", ")", "path))") == "import os.path"


class TestExportForm:
    """Test export reconstruction"""

    def test_operands_only(self):
        """export("Foo", "Bar", "baz") gives a comma list without spaces"""
        handler = FormRegistry().handler_get("export")
        assert handler("Foo", "Bar", "baz") == "export Foo,Bar,baz"

    def test_raw_tokens_with_form_name(self):
        handler = FormRegistry().handler_get("export")
        assert handler("export, ", "A, ", "b))") == "export A,b"


class TestToplevelForm:
    """Test the composite form splitting merged token runs"""

    def test_two_nested_forms(self):
        """Two markers give exactly two reconstructed entries"""
        tokens = [
            "toplevel, ", "($(Expr(", "import, ", "Base, ", "show))), ",
            "($(Expr(", "export, ", "A, ", "b)))))",
        ]
        result = FormRegistry().handler_get("toplevel")(*tokens)

        assert result.split("\n") == ["import Base.show", "export A,b"]

    def test_entries_match_their_own_handlers(self):
        registry = FormRegistry()
        tokens = [
            "toplevel, ", "($(Expr(", "export, ", "X, ", "y))), ",
            "($(Expr(", "import, ", "a, ", "b, ", "c)))))",
        ]
        entries = registry.handler_get("toplevel")(*tokens).split("\n")

        assert entries[0] == registry.handler_get("export")("export", "X", "y")
        assert entries[1] == registry.handler_get("import")("import", "a", "b", "c")

    def test_final_group_flushed_without_delimiter(self):
        """A single nested form never sees a marker after it, yet is emitted"""
        tokens = ["toplevel, ", "($(Expr(", "export, ", "only)))"]
        assert FormRegistry().handler_get("toplevel")(*tokens) == "export only"

    def test_unknown_nested_form(self):
        tokens = ["toplevel, ", "($(Expr(", "using, ", "Statistics)))"]
        with pytest.raises(UnknownFormError, match="using"):
            FormRegistry().handler_get("toplevel")(*tokens)

    def test_custom_marker(self):
        """The split marker follows the registry's configured marker"""
        tokens = ["toplevel, ", "(%(Expr(", "import, ", "os))), ", "(%(Expr(", "export, ", "f)))))"]
        result = FormRegistry(marker="%").handler_get("toplevel")(*tokens)
        assert result == "import os\nexport f"


class TestRegistryExtension:
    """Test registering forms and registry independence"""

    def test_unknown_form_raises(self):
        registry = FormRegistry()
        with pytest.raises(UnknownFormError):
            registry.handler_get("using")

    def test_unknown_form_is_key_error(self):
        """Callers catching KeyError still see the failure"""
        with pytest.raises(KeyError):
            FormRegistry().spec_get("nope")

    def test_register_new_form(self):
        registry = FormRegistry()
        registry.register(FormSpec(
            name="using",
            category=FormCategory.DECLARATION,
            description="Bring names into scope",
            parser=keywordParts_parse("using"),
            formatter=keywordJoin_format("using", ","),
        ))

        assert "using" in registry
        assert registry.handler_get("using")("using, ", "A, ", "B))") == "using A,B"

    def test_aliases_resolve_to_same_spec(self):
        registry = FormRegistry()
        registry.register(FormSpec(
            name="include",
            category=FormCategory.DECLARATION,
            description="",
            parser=keywordParts_parse("include", "incl"),
            formatter=keywordJoin_format("include", "."),
            aliases=["incl"],
        ))

        assert registry.spec_get("incl") is registry.spec_get("include")

    def test_registries_are_independent(self):
        first = FormRegistry()
        second = FormRegistry()
        first.register(FormSpec(
            name="using",
            category=FormCategory.DECLARATION,
            description="",
            parser=keywordParts_parse("using"),
            formatter=keywordJoin_format("using", ","),
        ))

        assert "using" in first
        assert "using" not in second

    def test_builtin_names(self):
        assert FormRegistry().names_list() == ["export", "import", "toplevel"]

    def test_list_by_category(self):
        registry = FormRegistry()
        declarations = {spec.name for spec in registry.forms_listByCategory(FormCategory.DECLARATION)}
        composites = {spec.name for spec in registry.forms_listByCategory(FormCategory.COMPOSITE)}

        assert declarations == {"import", "export"}
        assert composites == {"toplevel"}
