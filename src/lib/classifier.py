"""
Line classifier for re-rendered source text

A serializer that re-renders a parsed block can leave special forms
(import, export, ...) as interpolation artifacts such as

    $(Expr(:import, :os, :path, :join))

The classifier spots those lines by their leading marker and hands their
tokens to the matching FormRegistry entry. Every other line passes through
untouched.

Example:
    >>> classifier = LineClassifier(FormRegistry())
    >>> classifier.line_classify("$(Expr(:import, :os, :path, :join))")
    'import os.path.join'
    >>> classifier.line_classify("x = 1")
    'x = 1'
"""

from typing import Optional

from ..config import appsettings
from ..models.unit import SpecialFormEntry
from .errors import UnknownFormError
from .forms import FormRegistry, token_clean
from .log import LOG


def entry_parse(line: str, marker: str = "$", delimiter: str = ":") -> Optional[SpecialFormEntry]:
    """
    Detect a corrupted special form on one line

    Args:
        line: One line of re-rendered text
        marker: Leading character denoting a corrupted form
        delimiter: Separator between raw tokens

    Returns:
        SpecialFormEntry with the form name and the raw tokens, or None
        when the line (after leading whitespace) does not start with marker

    Example:
        >>> entry_parse("  $(Expr(:export, :A, :b))")
        SpecialFormEntry(formName='export', rawTokens=['export, ', 'A, ', 'b))'])
    """
    if not line.lstrip().startswith(marker):
        return None

    # The first segment is the marker's own prefix, e.g. "$(Expr("
    raw_tokens = line.split(delimiter)[1:]
    form_name = token_clean(raw_tokens[0]) if raw_tokens else ""
    return SpecialFormEntry(formName=form_name, rawTokens=raw_tokens)


class LineClassifier:
    """
    Classifies and repairs single lines against a FormRegistry

    Attributes:
        registry: Forms this classifier can reconstruct
        marker: Leading character denoting a corrupted form
        delimiter: Separator between raw tokens
    """

    def __init__(
        self,
        registry: FormRegistry,
        marker: Optional[str] = None,
        delimiter: Optional[str] = None,
    ) -> None:
        self.registry = registry
        self.marker = marker if marker is not None else appsettings.form_marker
        self.delimiter = delimiter if delimiter is not None else appsettings.token_delimiter

    def line_classify(self, line: str) -> str:
        """
        Return line unchanged, or its reconstruction if it is a corrupted form

        The line's indentation is re-applied to every line of the
        reconstruction.

        Raises:
            UnknownFormError: If the form has no registry entry
        """
        entry = entry_parse(line, self.marker, self.delimiter)
        if entry is None:
            return line

        LOG(f"Special form '{entry.formName}': {entry.rawTokens}", level=3)
        try:
            handler = self.registry.handler_get(entry.formName)
            reconstructed = handler(*entry.rawTokens)
        except UnknownFormError as e:
            raise UnknownFormError(e.form_name, line) from e

        indent = line[: len(line) - len(line.lstrip())]
        return "\n".join(indent + part for part in reconstructed.split("\n"))
