"""
Line classifier tests

Tests marker detection, dispatch to the registry, indentation handling,
and failure on unregistered forms.
"""

import pytest

from asinclude.lib.classifier import LineClassifier, entry_parse
from asinclude.lib.errors import UnknownFormError
from asinclude.lib.forms import FormRegistry


def corrupt(form, *names):
    """Render a form the way the upstream serializer corrupts it"""
    operands = "".join(f", :{name}" for name in names)
    return f"$(Expr(:{form}{operands}))"


def recorrupt(reconstructed):
    """Corrupt an already reconstructed "keyword a.b" / "keyword a,b" line again"""
    keyword, operands = reconstructed.split(" ", 1)
    separator = "." if keyword == "import" else ","
    return corrupt(keyword, *operands.split(separator))


@pytest.fixture
def classifier():
    return LineClassifier(FormRegistry(), marker="$", delimiter=":")


class TestEntryParse:
    """Test detection of corrupted special forms"""

    def test_plain_line(self):
        assert entry_parse("x = 1") is None

    def test_blank_line(self):
        assert entry_parse("") is None
        assert entry_parse("    ") is None

    def test_marker_not_leading(self):
        """A marker later in the line is ordinary text"""
        assert entry_parse('price = "$5"') is None

    def test_marked_line(self):
        entry = entry_parse("$(Expr(:export, :A, :b))")

        assert entry.formName == "export"
        assert entry.rawTokens == ["export, ", "A, ", "b))"]

    def test_marked_line_after_indentation(self):
        entry = entry_parse("        $(Expr(:import, :os))")
        assert entry.formName == "import"

    def test_marker_without_tokens(self):
        entry = entry_parse("$x")
        assert entry.formName == ""
        assert entry.rawTokens == []


class TestLineClassify:
    """Test line repair"""

    def test_passthrough(self, classifier):
        line = "    def f(self): return {'a': 1}"
        assert classifier.line_classify(line) == line

    def test_import(self, classifier):
        assert classifier.line_classify(corrupt("import", "os", "path", "join")) == "import os.path.join"

    def test_export(self, classifier):
        assert classifier.line_classify(corrupt("export", "Foo", "Bar", "baz")) == "export Foo,Bar,baz"

    def test_trailing_comment_dropped(self, classifier):
        line = "$(Expr(:import, :os, :path))  # filesystem helpers"
        assert classifier.line_classify(line) == "import os.path"

    def test_indentation_preserved(self, classifier):
        assert classifier.line_classify("    " + corrupt("export", "A")) == "    export A"

    def test_toplevel_reindents_every_line(self, classifier):
        line = "  $(Expr(:toplevel, :($(Expr(:import, :os))), :($(Expr(:export, :f)))))"
        assert classifier.line_classify(line) == "  import os\n  export f"

    def test_unknown_form_raises(self, classifier):
        with pytest.raises(UnknownFormError) as excinfo:
            classifier.line_classify(corrupt("using", "LinearAlgebra"))

        assert excinfo.value.form_name == "using"
        assert "using" in excinfo.value.line

    def test_unknown_form_inside_toplevel_reports_line(self, classifier):
        line = "$(Expr(:toplevel, :($(Expr(:using, :X))), :($(Expr(:export, :f)))))"
        with pytest.raises(UnknownFormError) as excinfo:
            classifier.line_classify(line)

        assert excinfo.value.form_name == "using"
        assert excinfo.value.line == line

    def test_registry_extension_visible(self, classifier):
        """Forms registered after the classifier is built are used"""
        from asinclude.lib.forms import keywordParts_parse, keywordJoin_format
        from asinclude.models.forms import FormSpec, FormCategory

        classifier.registry.register(FormSpec(
            name="using",
            category=FormCategory.DECLARATION,
            description="",
            parser=keywordParts_parse("using"),
            formatter=keywordJoin_format("using", ","),
        ))
        assert classifier.line_classify(corrupt("using", "A", "B")) == "using A,B"

    def test_custom_marker_and_delimiter(self):
        classifier = LineClassifier(FormRegistry(marker="@"), marker="@", delimiter="|")
        assert classifier.line_classify("@(Expr(|import, |os, |path))") == "import os.path"


class TestIdempotence:
    """Reconstructing, corrupting again and reconstructing gives the same text"""

    @pytest.mark.parametrize("form,names", [
        ("import", ["os", "path", "join"]),
        ("import", ["collections"]),
        ("export", ["Foo", "Bar", "baz"]),
        ("export", ["A"]),
    ])
    def test_reconstruction_is_stable(self, classifier, form, names):
        first = classifier.line_classify(corrupt(form, *names))
        second = classifier.line_classify(recorrupt(first))
        assert first == second
