"""
Unit-specific data models

Type-safe structures passed between the extractor, wrapper, and driver.
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Union


@dataclass
class Snippet:
    """
    One re-rendered code block

    The first and last lines are the block's enclosing delimiters
    (e.g. "begin" / "end") and are discarded during extraction.

    Attributes:
        lines: Raw text lines, delimiters included

    Example:
        >>> Snippet.from_text("begin\\n    x = 1\\nend").lines
        ['begin', '    x = 1', 'end']
    """
    lines: List[str] = field(default_factory=list)

    @classmethod
    def from_text(cls, text: str) -> "Snippet":
        """
        Build a snippet from multi-line text.

        Blank lines around the block are dropped first, so a triple-quoted
        literal starting and ending with a newline still has its delimiters
        as first and last line.
        """
        return cls(lines=text.strip("\n").split("\n"))

    @classmethod
    def from_block(cls, block: Union[str, Sequence[str], "Snippet"]) -> "Snippet":
        """Coerce a str, a line sequence, or a Snippet into a Snippet"""
        if isinstance(block, Snippet):
            return block
        if isinstance(block, str):
            return cls.from_text(block)
        return cls(lines=list(block))

    def body_get(self) -> List[str]:
        """Lines between the delimiters"""
        if len(self.lines) < 2:
            return []
        return self.lines[1:-1]


@dataclass
class SpecialFormEntry:
    """
    A corrupted special form detected on one line

    Attributes:
        formName: First clean token, used to look up the handler
        rawTokens: Untransformed tokens handed to the handler

    Example:
        For "$(Expr(:export, :A, :b))":
        SpecialFormEntry(
            formName="export",
            rawTokens=["export, ", "A, ", "b))"]
        )
    """
    formName: str
    rawTokens: List[str]


@dataclass
class UnitDefinition:
    """
    A named unit ready to be serialized to an artifact

    Attributes:
        name: Unit name (module name in sys.modules)
        bodyLines: Corrected body lines
    """
    name: str
    bodyLines: List[str]

    def source_render(self, keyword: str = "module", terminator: str = "end") -> str:
        """Serialize to artifact source text"""
        return "\n".join([f"{keyword} {self.name}", *self.bodyLines, terminator])


@dataclass(frozen=True)
class PublishEntry:
    """
    One publishing assignment into the shared namespace

    Attributes:
        localName: Name bound in the shared namespace
        qualifiedSource: Qualified reference into the unit (e.g. "m1.A")
    """
    localName: str
    qualifiedSource: str

    @classmethod
    def from_export(cls, unit_name: str, export_name: str) -> "PublishEntry":
        return cls(localName=export_name, qualifiedSource=f"{unit_name}.{export_name}")

    def statement_render(self) -> str:
        """
        Render as an artifact trailer line

        Example:
            >>> PublishEntry.from_export("m1", "A").statement_render()
            'A = m1.A'
        """
        return f"{self.localName} = {self.qualifiedSource}"
