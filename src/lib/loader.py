"""
Unit loader

Turns an artifact on disk into a fresh module object and publishes the
artifact's trailer into a shared namespace.

Artifact layout (keyword/terminator configurable):

    module m1
    <body lines>
    end
    A = m1.A
    b = m1.b

Before compiling, the body is lowered for Python: the envelope lines become
blank lines so line numbers in tracebacks match the file, top-level
"export a,b" lines become "__all__ += ['a', 'b']", and the margin of the first
body line is stripped.
"""

import linecache
import re
import sys
import types
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, MutableMapping, Optional, Protocol, Set, Tuple

from ..config import appsettings
from .errors import ArtifactFormatError
from .log import LOG


_MISSING = object()

_EXPORT_LINE = re.compile(r"^export\s+([A-Za-z_]\w*(?:\s*,\s*[A-Za-z_]\w*)*)\s*$")
_INDENTED_EXPORT = re.compile(r"^\s+export\s+[A-Za-z_]\w*(?:\s*,\s*[A-Za-z_]\w*)*\s*$")


class UnitLoader(Protocol):
    """Collaborator that loads artifacts and lists what they export"""

    def unit_load(self, path: Path, name: str) -> Any:
        ...

    def exports_list(self, unit: Any) -> Set[str]:
        ...

    def unit_reload(self, path: Path, name: str, namespace: MutableMapping[str, Any]) -> Any:
        ...


@dataclass
class ArtifactSections:
    """
    An artifact split at its envelope

    Attributes:
        body: Lines between the opening declaration and the terminator
        bodyOffset: Zero-based file line of the first body line
        trailer: Publishing lines after the terminator
        trailerOffset: Zero-based file line of the first trailer line
    """
    body: List[str] = field(default_factory=list)
    bodyOffset: int = 1
    trailer: List[str] = field(default_factory=list)
    trailerOffset: int = 0


def artifact_split(
    text: str,
    name: str,
    keyword: Optional[str] = None,
    terminator: Optional[str] = None,
) -> ArtifactSections:
    """
    Split artifact text into body and trailer

    The closing line is the last line equal to the terminator, so a body
    line that happens to read "end" does not cut the unit short.

    Raises:
        ArtifactFormatError: If the first line is not "<keyword> <name>" or
                             no terminator line follows it
    """
    keyword = keyword if keyword is not None else appsettings.unit_keyword
    terminator = terminator if terminator is not None else appsettings.unit_terminator

    lines = text.split("\n")
    header = f"{keyword} {name}"
    if lines[0].strip() != header:
        raise ArtifactFormatError(
            f"Artifact for '{name}' must start with '{header}', found {lines[0]!r}"
        )

    closing = [i for i, line in enumerate(lines) if i > 0 and line.strip() == terminator]
    if not closing:
        raise ArtifactFormatError(f"Artifact for '{name}' has no closing '{terminator}' line")

    end = closing[-1]
    return ArtifactSections(
        body=lines[1:end],
        bodyOffset=1,
        trailer=lines[end + 1:],
        trailerOffset=end + 1,
    )


def body_lower(body: List[str]) -> Tuple[List[str], bool]:
    """
    Lower body lines to plain Python

    Args:
        body: Unit body lines as written in the artifact

    Returns:
        Tuple of (lowered lines, whether any export line was found).
        The line count never changes.

    Raises:
        ArtifactFormatError: If an export line sits inside an indented block

    The margin removed is the indentation of the first non-blank line, and
    only from lines that start with it; lines inside a string literal may
    sit further left.

    Example:
        >>> body_lower(["    class A: pass", "    export A"])
        (['class A: pass', "__all__ += ['A']"], True)
    """
    if not body:
        return [], False

    first = next((line for line in body if line.strip()), "")
    margin = first[: len(first) - len(first.lstrip())]

    lowered: List[str] = []
    has_exports = False
    for line in body:
        if margin and line.startswith(margin):
            line = line[len(margin):]
        if _INDENTED_EXPORT.match(line):
            raise ArtifactFormatError(
                f"export must be at the top level of the unit, found {line.strip()!r}"
            )
        match = _EXPORT_LINE.match(line)
        if match:
            names = [n.strip() for n in match.group(1).split(",")]
            lowered.append(f"__all__ += {names!r}")
            has_exports = True
        else:
            lowered.append(line)
    return lowered, has_exports


class PythonUnitLoader:
    """
    Loads artifacts as Python modules registered in sys.modules

    Errors from compiling or executing a unit (SyntaxError, anything the
    unit's own code raises) propagate unchanged.
    """

    def __init__(self, keyword: Optional[str] = None, terminator: Optional[str] = None) -> None:
        self.keyword = keyword if keyword is not None else appsettings.unit_keyword
        self.terminator = terminator if terminator is not None else appsettings.unit_terminator

    def sections_read(self, path: Path, name: str) -> ArtifactSections:
        """Read and split an artifact"""
        text = Path(path).read_text(encoding="utf-8")
        return artifact_split(text, name, self.keyword, self.terminator)

    def module_build(self, path: Path, name: str, sections: ArtifactSections) -> types.ModuleType:
        """
        Execute the body of an artifact as a fresh module

        The module is registered in sys.modules before its code runs, as the
        import system does, so dataclasses and pickling can find it. If the
        code raises, the previous sys.modules entry is restored.
        """
        filename = str(path)
        lowered, has_exports = body_lower(sections.body)
        source = "\n" * sections.bodyOffset + "\n".join(lowered) + "\n"
        code = compile(source, filename, "exec")

        module = types.ModuleType(name)
        module.__file__ = filename
        if has_exports:
            module.__dict__["__all__"] = []

        # Lets inspect.getsource() see the lowered text; mtime None keeps
        # checkcache() from evicting it.
        linecache.cache[filename] = (len(source), None, source.splitlines(True), filename)

        previous = sys.modules.get(name, _MISSING)
        sys.modules[name] = module
        try:
            exec(code, module.__dict__)
        except BaseException:
            if previous is _MISSING:
                sys.modules.pop(name, None)
            else:
                sys.modules[name] = previous
            raise

        LOG(f"Built module '{name}' from {filename}", level=2)
        return module

    def unit_load(self, path: Path, name: str) -> types.ModuleType:
        """Load an artifact's unit; the trailer, if any, is not executed"""
        return self.module_build(path, name, self.sections_read(path, name))

    def exports_list(self, unit: Any) -> Set[str]:
        """
        Names a unit marks as public

        __all__ when the unit declares one, otherwise every name in the
        module dict that does not start with an underscore, as
        "from unit import *" would see it.
        """
        declared = getattr(unit, "__all__", None)
        if declared is not None:
            return set(declared)

        return {
            key for key in vars(unit)
            if not key.startswith("_")
        }

    def unit_reload(
        self,
        path: Path,
        name: str,
        namespace: MutableMapping[str, Any],
    ) -> types.ModuleType:
        """
        Rebuild the unit and run the artifact trailer against namespace

        The trailer runs against a staged copy of namespace. Only when every
        statement succeeded are the unit binding and the names the trailer
        assigned written back, in one update().
        """
        sections = self.sections_read(path, name)
        filename = str(path)
        trailer_source = "\n" * sections.trailerOffset + "\n".join(sections.trailer) + "\n"
        trailer_code = compile(trailer_source, filename, "exec")

        module = self.module_build(path, name, sections)

        staging: Dict[str, Any] = dict(namespace)
        staging[name] = module
        exec(trailer_code, staging)

        updates = {
            key: value for key, value in staging.items()
            if key == name or namespace.get(key, _MISSING) is not value
        }
        if "__builtins__" not in namespace:
            updates.pop("__builtins__", None)
        namespace.update(updates)

        LOG(f"Published {sorted(k for k in updates if k != name)} from '{name}'", level=2)
        return module


def namespace_default() -> MutableMapping[str, Any]:
    """Globals of __main__: the REPL or notebook namespace"""
    return sys.modules["__main__"].__dict__

