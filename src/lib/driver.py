"""
Reload/injection driver

Relocates a re-rendered code block into a freshly loaded unit and
publishes the unit's exports into a shared namespace. Running it again
with the same unit name replaces every definition, which is what makes
redefining classes in a long-lived session possible.

Stages, strictly in order (each is ProgramState -> ProgramState):

    1. unit_generate       extract + wrap the block into unit source
    2. artifact_persist    write <workdir>/<name><ext>, overwriting
    3. unit_load           build the unit; shared namespace untouched
    4. exports_introspect  list the unit's exported names
    5. manifest_append     append "x = name.x" per non-blacklisted export
    6. unit_reload         rebuild the unit, publish the trailer

Any exception aborts the run; the artifact stays on disk for inspection.

Example:
    >>> asinclude("m1", '''
    ... begin
    ...     class A:
    ...         x: int = 1
    ...     b = A()
    ...     $(Expr(:export, :A, :b))
    ... end
    ... ''')
    >>> A, b   # now bound in __main__
"""

from pathlib import Path
from typing import Any, Iterable, Iterator, List, MutableMapping, Optional, Sequence, Set, Union

from ..config import appsettings, AppSettings
from ..models.state import ProgramState, pipeline
from ..models.unit import Snippet, PublishEntry
from .classifier import LineClassifier
from .extractor import BlockExtractor
from .forms import FormRegistry
from .loader import PythonUnitLoader, UnitLoader, namespace_default
from .log import LOG, state_connectToLogger
from .profile import FormProfile
from .wrapper import unit_wrap


Block = Union[str, Sequence[str], Snippet]


class Blacklist:
    """Names never published into the shared namespace"""

    def __init__(self, names: Optional[Iterable[str]] = None) -> None:
        self.names: Set[str] = set(names if names is not None else appsettings.default_blacklist)

    def register(self, name: str) -> None:
        self.names.add(name)

    def __contains__(self, name: str) -> bool:
        return name in self.names

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.names))

    def exports_filter(self, exports: Iterable[str]) -> List[str]:
        """Exports allowed through, sorted for a stable artifact"""
        return sorted(name for name in exports if name not in self.names)


class ReloadDriver:
    """
    Owns one pipeline's configuration: forms, blacklist, loader, settings

    Drivers share nothing, so tests and independent sessions can each hold
    their own without cross-contamination.

    Attributes:
        settings: AppSettings used for markers, envelope and extension
        registry: FormRegistry used to repair corrupted lines
        blacklist: Names excluded from publishing
        loader: UnitLoader collaborator (PythonUnitLoader by default)
    """

    def __init__(
        self,
        registry: Optional[FormRegistry] = None,
        blacklist: Optional[Blacklist] = None,
        loader: Optional[UnitLoader] = None,
        settings: Optional[AppSettings] = None,
    ) -> None:
        self.settings = settings if settings is not None else appsettings
        self.registry = registry if registry is not None else FormRegistry(self.settings.form_marker)
        self.blacklist = blacklist if blacklist is not None else Blacklist(self.settings.default_blacklist)
        self.loader: UnitLoader = loader if loader is not None else PythonUnitLoader(
            self.settings.unit_keyword, self.settings.unit_terminator
        )
        self.extractor = BlockExtractor(
            LineClassifier(self.registry, self.settings.form_marker, self.settings.token_delimiter)
        )

        if self.settings.profile_file:
            self.profile_apply(FormProfile(self.settings.profile_file))

    def profile_apply(self, profile: FormProfile) -> None:
        """Register a profile's forms and blacklist names"""
        self.registry.profile_apply(profile)
        for name in profile.blacklist:
            self.blacklist.register(name)
        LOG(f"Applied {profile!r}", level=2)

    def state_create(
        self,
        name: str,
        block: Block,
        namespace: Optional[MutableMapping[str, Any]] = None,
        workdir: Optional[Union[str, Path]] = None,
        verbosity: int = 0,
    ) -> ProgramState:
        """
        Build the initial state for a run

        Raises:
            ValueError: If name is not a valid identifier
        """
        if not name.isidentifier():
            raise ValueError(f"Unit name must be a valid identifier, got {name!r}")

        return ProgramState(
            verbosity=verbosity,
            unitName=name,
            snippet=Snippet.from_block(block),
            workdir=Path(workdir) if workdir is not None else Path.cwd(),
            namespace=namespace if namespace is not None else namespace_default(),
        )

    def unit_generate(self, inputstate: ProgramState) -> ProgramState:
        """Repair the snippet and wrap it into unit source"""
        state = inputstate.copy()
        LOG(f"Generating unit '{state.unitName}'...", level=1)

        lines = self.extractor.snippet_extract(state.snippet or Snippet())
        state.source = unit_wrap(
            lines,
            state.unitName,
            keyword=self.settings.unit_keyword,
            terminator=self.settings.unit_terminator,
        )
        LOG(f"Unit source:\n{state.source}", level=3)
        return state

    def artifact_persist(self, inputstate: ProgramState) -> ProgramState:
        """Write the unit source, replacing any earlier artifact of the same name"""
        state = inputstate.copy()
        state.artifactPath = state.workdir / self.settings.artifactName_make(state.unitName)

        with open(state.artifactPath, "w", encoding="utf-8") as f:
            f.write(state.source + "\n")
        LOG(f"Wrote {state.artifactPath}", level=2)
        return state

    def unit_load(self, inputstate: ProgramState) -> ProgramState:
        """First load: defines the unit, leaves the shared namespace alone"""
        state = inputstate.copy()
        LOG(f"Loading {state.artifactPath}...", level=1)
        state.unit = self.loader.unit_load(state.artifactPath, state.unitName)
        return state

    def exports_introspect(self, inputstate: ProgramState) -> ProgramState:
        state = inputstate.copy()
        state.exports = set(self.loader.exports_list(state.unit))
        LOG(f"Unit '{state.unitName}' exports {sorted(state.exports)}", level=2)
        return state

    def manifest_append(self, inputstate: ProgramState) -> ProgramState:
        """Append one publishing assignment per export not blacklisted"""
        state = inputstate.copy()
        state.manifest = [
            PublishEntry.from_export(state.unitName, export)
            for export in self.blacklist.exports_filter(state.exports)
        ]

        with open(state.artifactPath, "a", encoding="utf-8") as f:
            for entry in state.manifest:
                f.write(entry.statement_render() + "\n")

        skipped = sorted(state.exports - {entry.localName for entry in state.manifest})
        if skipped:
            LOG(f"Blacklisted, not published: {skipped}", level=2)
        LOG(f"Appended {len(state.manifest)} publishing statements", level=2)
        return state

    def unit_reload(self, inputstate: ProgramState) -> ProgramState:
        """Second load: rebuilds the unit and publishes into the shared namespace"""
        state = inputstate.copy()
        LOG(f"Reloading {state.artifactPath}...", level=1)
        state.unit = self.loader.unit_reload(state.artifactPath, state.unitName, state.namespace)
        state.published = [entry.localName for entry in state.manifest]
        LOG(f"Published {state.published}", level=1)
        return state

    def stages_list(self) -> tuple:
        """The pipeline stages in execution order"""
        return (
            self.unit_generate,
            self.artifact_persist,
            self.unit_load,
            self.exports_introspect,
            self.manifest_append,
            self.unit_reload,
        )

    def run(
        self,
        name: str,
        block: Block,
        namespace: Optional[MutableMapping[str, Any]] = None,
        workdir: Optional[Union[str, Path]] = None,
        verbosity: int = 0,
    ) -> ProgramState:
        """
        Relocate block into unit name and publish its exports

        Args:
            name: Unit name; also the artifact's base filename
            block: Re-rendered block (text, lines or Snippet) with delimiters
            namespace: Shared namespace (default: __main__ globals)
            workdir: Artifact directory (default: current directory)
            verbosity: Logging verbosity (0 silent, 3 debug)

        Returns:
            Final ProgramState (artifactPath, unit, exports, manifest, published)
        """
        state = self.state_create(name, block, namespace, workdir, verbosity)
        state_connectToLogger(state)
        return pipeline(state, *self.stages_list())


_driver: Optional[ReloadDriver] = None


def driver_default() -> ReloadDriver:
    """
    The driver behind asinclude(), created on first use

    Extend it before invoking, e.g.
        driver_default().blacklist.register("data")
    """
    global _driver
    if _driver is None:
        _driver = ReloadDriver()
    return _driver


def asinclude(
    name: str,
    block: Block,
    namespace: Optional[MutableMapping[str, Any]] = None,
) -> None:
    """
    Relocate block into a reloadable unit and publish its exports

    Writes <name>.pyunit in the current directory and binds every
    non-blacklisted export, plus the unit itself, in namespace
    (default: __main__ globals).
    """
    driver_default().run(name, block, namespace=namespace)
