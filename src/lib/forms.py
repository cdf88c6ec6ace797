"""
Special form handlers for asinclude

Each form turns the raw tokens of a corrupted line back into source text.
Uses FormSpec for metadata so registries can be listed and extended.
"""

import re
from typing import Callable, Dict, List, Optional, Sequence, TYPE_CHECKING

from ..config import appsettings
from ..models.forms import FormSpec, FormCategory
from .errors import UnknownFormError
from .log import LOG

if TYPE_CHECKING:
    from .profile import FormProfile


_TOKEN_NOISE = re.compile(r",|\s|\)|#.*$")


def token_clean(token: str) -> str:
    """
    Strip commas, whitespace, closing parentheses and a trailing comment

    Example:
        >>> token_clean(" path))  # qualified")
        'path'
    """
    return _TOKEN_NOISE.sub("", token)


def tokens_clean(tokens: Sequence[str]) -> List[str]:
    """Clean every token, keeping empties so positions are preserved"""
    return [token_clean(token) for token in tokens]


def keywordParts_parse(*leading: str) -> Callable[[Sequence[str]], List[str]]:
    """
    Factory for parsers of keyword-led forms (import, export, ...)

    The returned parser cleans the tokens, drops empties and drops a
    leading token naming the form, leaving only the operands.
    """
    def parser(tokens: Sequence[str]) -> List[str]:
        parts = [part for part in tokens_clean(tokens) if part]
        if parts and parts[0] in leading:
            parts = parts[1:]
        return parts
    return parser


def keywordJoin_format(keyword: str, separator: str) -> Callable[[List[str]], str]:
    """Factory for formatters rendering "<keyword> <part><sep><part>..." """
    def formatter(parts: List[str]) -> str:
        return f"{keyword} {separator.join(parts)}"
    return formatter


class FormRegistry:
    """
    Registry of special form specifications and handlers

    Maps form names to FormSpec objects. Each registry is independent:
    registering a form on one instance never affects another.
    """

    def __init__(self, marker: Optional[str] = None) -> None:
        """
        Initialize the registry and register all built-in forms

        Args:
            marker: Corruption marker used by composite forms to find
                    where a nested form starts (default from settings)
        """
        self.marker = marker if marker is not None else appsettings.form_marker
        self.specs: Dict[str, FormSpec] = {}
        self.declarationForms_register()
        self.compositeForms_register()

    def register(self, spec: FormSpec) -> None:
        """Register a form specification, replacing any previous one"""
        self.specs[spec.name] = spec
        for alias in spec.aliases:
            self.specs[alias] = spec

    def __contains__(self, name: str) -> bool:
        return name in self.specs

    def spec_get(self, name: str) -> FormSpec:
        """
        Get full form specification by name

        Raises:
            UnknownFormError: If no form is registered under name
        """
        try:
            return self.specs[name]
        except KeyError:
            raise UnknownFormError(name) from None

    def handler_get(self, name: str) -> Callable[..., str]:
        """
        Get the handler (variadic raw tokens -> source text) for a form

        Raises:
            UnknownFormError: If no form is registered under name
        """
        return self.spec_get(name).render

    def names_list(self) -> List[str]:
        """Sorted names (aliases included) this registry can reconstruct"""
        return sorted(self.specs)

    def forms_listByCategory(self, category: FormCategory) -> List[FormSpec]:
        """Get all forms in a category, aliases listed once"""
        unique = {id(spec): spec for spec in self.specs.values()}
        return [spec for spec in unique.values() if spec.category == category]

    def declarationForms_register(self) -> None:
        """Register import and export"""

        declaration_specs = [
            ('import', '.', 'Qualified-name import', ['import os.path.join']),
            ('export', ',', 'Comma-separated export list', ['export Foo,Bar,baz']),
        ]

        for name, separator, desc, examples in declaration_specs:
            self.register(FormSpec(
                name=name,
                category=FormCategory.DECLARATION,
                description=desc,
                parser=keywordParts_parse(name),
                formatter=keywordJoin_format(name, separator),
                examples=examples,
            ))

    def compositeForms_register(self) -> None:
        """Register toplevel, the form that merges several forms into one run"""

        def toplevel_parse(tokens: Sequence[str]) -> List[List[str]]:
            """Split a merged token run into one token group per nested form"""
            # The first two tokens are the form's own name and the opening
            # of the first nested form.
            groups: List[List[str]] = []
            current: List[str] = []
            for token in tokens_clean(tokens)[2:]:
                if self.marker in token:
                    if current:
                        groups.append(current)
                    current = []
                    continue
                current.append(token)
            if current:
                groups.append(current)
            return groups

        def toplevel_format(groups: List[List[str]]) -> str:
            """Dispatch each group to the form named by its first token"""
            entries = []
            for group in groups:
                LOG(f"toplevel group: {group}", level=3)
                entries.append(self.handler_get(group[0])(*group))
            return "\n".join(entries)

        self.register(FormSpec(
            name='toplevel',
            category=FormCategory.COMPOSITE,
            description='Several special forms merged into one token run',
            parser=toplevel_parse,
            formatter=toplevel_format,
            examples=['import Base.show\nexport A,b'],
        ))

    def profile_apply(self, profile: "FormProfile") -> None:
        """
        Register every keyword-led form declared in a profile

        Args:
            profile: Loaded FormProfile
        """
        for name, declaration in profile.forms.items():
            keyword = declaration.get('keyword', name)
            separator = declaration.get('separator', ',')
            self.register(FormSpec(
                name=name,
                category=FormCategory.PROFILE,
                description=declaration.get('description', f"Profile form '{name}'"),
                parser=keywordParts_parse(name, keyword, *declaration.get('aliases', [])),
                formatter=keywordJoin_format(keyword, separator),
                aliases=list(declaration.get('aliases', [])),
            ))
            LOG(f"Registered profile form '{name}' ({keyword}, sep={separator!r})", level=2)
