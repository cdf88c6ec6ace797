#!/usr/bin/env python3
"""
asinclude - Redefinable units for long-lived Python sessions

Normally a class defined at the top level of a REPL or notebook can only
be replaced piecemeal: old instances keep the old class, pickling finds
__main__, and spawned workers cannot import it. asinclude relocates the
block into a real module that is rebuilt on every call, then re-publishes
the module's exports under their short names.

As with other ChRIS-style apps, this command line wraps the same pipeline
the library uses, which is handy for checking what artifact a block
produces before using it in a session.

Usage:
    asinclude inputdir/ outputdir/ --inputFile cell.txt --unitName m1

    The artifact is written to outputdir/m1.pyunit, loaded, and the names
    it publishes are reported.

Examples:
    # Generate and load, reporting published names
    asinclude . out/ --inputFile cell.txt --unitName m1

    # With extra forms and blacklist names
    asinclude . out/ --inputFile cell.txt --unitName m1 --profile forms.yaml

    # Print the highlighted artifact
    asinclude . out/ --inputFile cell.txt --unitName m1 --show -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .lib import ReloadDriver, AsincludeError, __version__, LOG, state_connectToLogger
from .lib.lexer import artifact_highlight
from .lib.profile import FormProfile
from .models import ProgramState, Snippet, pipeline


DISPLAY_TITLE = r"""
                  _            _           _
   __ _ ___ _ __ (_)_ __   ___| |_   _  __| | ___
  / _` / __| '_ \| | '_ \ / __| | | | |/ _` |/ _ \
 | (_| \__ \ | | | | | | | (__| | |_| | (_| |  __/
  \__,_|___/_| |_|_|_| |_|\___|_|\__,_|\__,_|\___|

  Redefinable units for long-lived sessions
"""

# Define CLI arguments
parser = ArgumentParser(
    description="asinclude - relocate a code block into a reloadable unit",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Snippet file (relative to inputdir)"
)

parser.add_argument(
    "--unitName", required=True, type=str, help="Name of the unit (and artifact) to (re)define"
)

parser.add_argument(
    "--profile",
    default=None,
    type=str,
    help="YAML form profile adding special forms and blacklist names",
)

parser.add_argument(
    "--show",
    action="store_true",
    help="Print the highlighted artifact after loading",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve paths.

    Returns:
        ProgramState with inputSourceFile resolved, workdir created and
        envOK set

    Exits:
        1 if the snippet file is missing or the unit name is not an
        identifier
    """
    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile
    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        sys.exit(1)
    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    if not state.unitName.isidentifier():
        print(f"Error: Unit name must be an identifier: {state.unitName!r}", file=sys.stderr)
        sys.exit(1)

    state.workdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Artifact directory: {state.workdir}", level=2)

    state.namespace = {"__name__": "__asinclude__"}
    state.envOK = True
    return state


def snippet_read(inputstate: ProgramState) -> ProgramState:
    """
    Read the snippet file.

    Exits:
        1 if the file cannot be read
    """
    state = inputstate.copy()

    try:
        text = state.inputSourceFile.read_text(encoding="utf-8")
    except OSError as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    state.snippet = Snippet.from_text(text)
    LOG(f"Read {len(state.snippet.lines)} lines from {state.inputSourceFile.name}", level=2)
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display the artifact path and published names.

    Returns:
        ProgramState unchanged (terminal pipeline stage)
    """
    state: ProgramState = inputstate.copy()

    if state.show and state.artifactPath:
        print(artifact_highlight(state.artifactPath.read_text(encoding="utf-8")))

    LOG("\n✓ Unit loaded!", level=1)
    LOG(f"  Artifact:  {state.artifactPath}", level=1)
    LOG(f"  Exports:   {', '.join(sorted(state.exports)) or '(none)'}", level=1)
    LOG(f"  Published: {', '.join(state.published) or '(none)'}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="asinclude - Redefinable units",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - relocate a snippet into a unit and load it.

    Orchestrates the full pipeline:
        1. env_check: Validate paths
        2. snippet_read: Read the snippet file
        3. unit_generate .. unit_reload: the reload driver's stages
        4. results_report: Display results

    Args:
        options: CLI arguments from argparse
        inputdir: Directory containing the snippet file
        outputdir: Directory receiving the artifact

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """
    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    state_connectToLogger(state)

    driver = ReloadDriver()

    try:
        if state.profile:
            driver.profile_apply(FormProfile(state.profile))
        pipeline(state, env_check, snippet_read, *driver.stages_list(), results_report)
    except (AsincludeError, SyntaxError) as e:
        print(f"Error: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
