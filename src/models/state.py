"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Set, Callable, MutableMapping
from dataclasses import dataclass, field

from .unit import Snippet, PublishEntry


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the reload pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the reload progresses.

    Pipeline stages and their state additions:
        - Initial: unitName, snippet, workdir, namespace, verbosity
        - unit_generate: source
        - artifact_persist: artifactPath
        - unit_load: unit
        - exports_introspect: exports
        - manifest_append: manifest
        - unit_reload: unit (rebuilt), published

    The CLI adds its own stages in front (env_check, snippet_read) and
    behind (results_report), using the CLI attributes below.

    Attributes:
        inputdir: Directory containing the snippet file (CLI)
        outputdir: Directory receiving the artifact (CLI)
        verbosity: Logging verbosity level (0-3)
        inputFile: Snippet filename relative to inputdir (CLI)
        profile: Optional YAML form profile path (CLI)
        show: Print the highlighted artifact after reload (CLI)
        envOK: Environment validation passed (CLI)
        inputSourceFile: Resolved path to the snippet file (CLI)
        unitName: Name of the unit being (re)defined
        snippet: Re-rendered code block to relocate
        workdir: Directory the artifact is written to
        namespace: Shared namespace receiving published names
        source: Wrapped unit source text
        artifactPath: Path of the written artifact
        unit: Loaded unit (module object)
        exports: Names the loaded unit exports
        manifest: Publishing entries appended to the artifact
        published: Names actually bound in the shared namespace
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    profile: Optional[str] = field(default=None)
    show: bool = field(default=False)

    # CLI state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))

    # Pipeline state
    unitName: str = field(default="")
    snippet: Optional[Snippet] = field(default=None)
    workdir: Path = field(default_factory=Path.cwd)
    namespace: Optional[MutableMapping[str, Any]] = field(default=None)
    source: str = field(default="")
    artifactPath: Optional[Path] = field(default=None)
    unit: Optional[Any] = field(default=None)  # ModuleType at runtime
    exports: Set[str] = field(default_factory=set)
    manifest: List[PublishEntry] = field(default_factory=list)
    published: List[str] = field(default_factory=list)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Merges CLI options with explicitly provided directories to create
        the initial program state. The output directory doubles as the
        working directory for the artifact.

        Args:
            options: Parsed CLI arguments (inputFile, unitName, etc.)
            inputdir: Directory containing the snippet file
            outputdir: Directory for the artifact

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {
            **filtered_options,
            "inputdir": inputdir,
            "outputdir": outputdir,
            "workdir": outputdir,
        }

        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        The shared namespace is carried by reference, never copied.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state. A stage that
    raises aborts the pipeline; later stages never run.

    Args:
        initial_state: Starting ProgramState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ProgramState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            unit_generate,
            artifact_persist,
            unit_load,
        )

    This is equivalent to:
        unit_load(artifact_persist(unit_generate(initial_state)))
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
