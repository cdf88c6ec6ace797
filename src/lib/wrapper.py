"""
Unit wrapper

Pure text assembly: wraps corrected lines in a named unit declaration.
The body is not validated here; syntax errors surface when the unit loads.
"""

from typing import List, Optional

from ..config import appsettings
from ..models.unit import UnitDefinition


def unit_wrap(
    lines: List[str],
    name: str,
    keyword: Optional[str] = None,
    terminator: Optional[str] = None,
) -> str:
    """
    Produce complete unit source text

    Args:
        lines: Corrected body lines
        name: Unit name
        keyword: Opening keyword (default from settings, "module")
        terminator: Closing line (default from settings, "end")

    Returns:
        "<keyword> <name>", the body lines and the terminator, newline-joined

    Example:
        >>> unit_wrap(["x = 1"], "m1")
        'module m1\\nx = 1\\nend'
    """
    definition = UnitDefinition(name=name, bodyLines=list(lines))
    return definition.source_render(
        keyword=keyword if keyword is not None else appsettings.unit_keyword,
        terminator=terminator if terminator is not None else appsettings.unit_terminator,
    )
