"""
Special form specification and metadata models

Defines the structure and categories of respecializable special forms for
registry management and documentation.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Callable, List, Sequence


class FormCategory(Enum):
    """
    Categories of special forms

    Used for organization and for listing what a registry supports.
    """
    DECLARATION = "declaration"  # import, export
    COMPOSITE = "composite"      # toplevel
    PROFILE = "profile"          # forms declared in a YAML profile


@dataclass
class FormSpec:
    """
    Specification for a special form

    A form is reconstructed in two steps: the parser turns the raw tokens
    of a corrupted line into clean parts, the formatter renders those parts
    as source text.

    Attributes:
        name: Form name as it appears in the first clean token
        category: Category for organization
        description: Human-readable description
        parser: Raw tokens -> clean parts
        formatter: Clean parts -> reconstructed source text
        examples: Example reconstructions
        aliases: Alternative names for the form
    """
    name: str
    category: FormCategory
    description: str
    parser: Callable[[Sequence[str]], Any]
    formatter: Callable[[Any], str]
    examples: List[str] = field(default_factory=list)
    aliases: List[str] = field(default_factory=list)

    def render(self, *tokens: str) -> str:
        """
        Reconstruct source text from raw tokens

        Args:
            *tokens: Raw (uncleaned) tokens of the corrupted form

        Returns:
            Reconstructed source text, possibly spanning several lines
        """
        return self.formatter(self.parser(tokens))
