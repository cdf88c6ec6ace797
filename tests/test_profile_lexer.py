"""
Profile, lexer and settings tests

Tests YAML form profiles, artifact highlighting tokens, and environment
driven configuration.
"""

import pytest
from pygments.token import Generic, Keyword, Name

from asinclude.config import AppSettings
from asinclude.lib.driver import ReloadDriver
from asinclude.lib.errors import ProfileError
from asinclude.lib.forms import FormRegistry
from asinclude.lib.lexer import UnitLexer, artifact_highlight
from asinclude.lib.profile import FormProfile
from asinclude.models.forms import FormCategory


PROFILE_YAML = """
blacklist:
  - data
forms:
  using:
    keyword: using
    separator: ","
    description: Bring names into scope
  include:
    separator: "."
    aliases: [incl]
"""


@pytest.fixture
def profile_path(tmp_path):
    path = tmp_path / "forms.yaml"
    path.write_text(PROFILE_YAML, encoding="utf-8")
    return path


class TestFormProfile:
    """Test loading and applying YAML profiles"""

    def test_load(self, profile_path):
        profile = FormProfile(profile_path)

        assert profile.blacklist == ["data"]
        assert sorted(profile.forms) == ["include", "using"]

    def test_forms_registered(self, profile_path):
        registry = FormRegistry()
        registry.profile_apply(FormProfile(profile_path))

        assert registry.handler_get("using")("using, ", "A, ", "B))") == "using A,B"
        assert registry.handler_get("include")("include, ", "pkg, ", "mod))") == "include pkg.mod"
        assert registry.handler_get("incl")("incl, ", "pkg))") == "include pkg"
        assert {spec.name for spec in registry.forms_listByCategory(FormCategory.PROFILE)} == {"using", "include"}

    def test_driver_from_settings(self, profile_path):
        driver = ReloadDriver(settings=AppSettings(_env_file=None, profile_file=str(profile_path)))

        assert "data" in driver.blacklist
        assert "__builtins__" in driver.blacklist
        assert "using" in driver.registry

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        profile = FormProfile(path)
        assert profile.forms == {}
        assert profile.blacklist == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(ProfileError, match="not found"):
            FormProfile(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("forms: [unclosed", encoding="utf-8")

        with pytest.raises(ProfileError, match="Failed to parse"):
            FormProfile(path)

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ProfileError, match="mapping"):
            FormProfile(path)

    def test_blacklist_must_be_list(self, tmp_path):
        path = tmp_path / "bl.yaml"
        path.write_text("blacklist: data\n", encoding="utf-8")

        with pytest.raises(ProfileError, match="blacklist"):
            FormProfile(path)


class TestUnitLexer:
    """Test artifact highlighting tokens"""

    ARTIFACT = "module m1\nclass A: pass\n$(Expr(:using, :X))\nexport A\nend\nA = m1.A\n"

    def tokens(self):
        return [(ttype, value) for ttype, value in UnitLexer().get_tokens(self.ARTIFACT)]

    def test_envelope(self):
        tokens = self.tokens()
        assert (Keyword.Namespace, "module") in tokens
        assert (Name.Namespace, "m1") in tokens
        assert (Keyword.Namespace, "end") in tokens

    def test_export(self):
        assert (Keyword.Declaration, "export") in self.tokens()

    def test_unrepaired_marker(self):
        errors = [value for ttype, value in self.tokens() if ttype is Generic.Error]
        assert errors == ["$(Expr(:using, :X))\n"]

    def test_trailer(self):
        assert (Name.Variable, "A") in self.tokens()

    def test_python_body_highlighted(self):
        assert (Keyword, "class") in self.tokens()

    def test_highlight_round_trips_text(self):
        """Formatting with the null formatter returns the input unchanged"""
        from pygments.formatters import NullFormatter

        assert artifact_highlight(self.ARTIFACT, NullFormatter()) == self.ARTIFACT


class TestSettings:
    """Test configuration from the environment"""

    def test_defaults(self):
        settings = AppSettings(_env_file=None)

        assert settings.form_marker == "$"
        assert settings.token_delimiter == ":"
        assert settings.default_blacklist == ["__builtins__"]
        assert settings.artifactName_make("m1") == "m1.pyunit"
        assert settings.unitHeader_make("m1") == "module m1"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("ASINCLUDE_UNIT_KEYWORD", "unit")
        monkeypatch.setenv("ASINCLUDE_DEFAULT_BLACKLIST", '["__builtins__", "data"]')

        settings = AppSettings(_env_file=None)

        assert settings.unit_keyword == "unit"
        assert settings.default_blacklist == ["__builtins__", "data"]
