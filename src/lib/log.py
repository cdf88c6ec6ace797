"""
Centralized logging using Loguru with context-aware verbosity.

LOG() respects the verbosity of the ProgramState currently bound to the
logging context, so lib modules can log without passing state around.

Usage:
    from asinclude.lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)

    LOG("Loaded unit m1", level=1)
    LOG("Manifest: A = m1.A", level=2)
    LOG("Token run: ['export, ', 'A))']", level=3)

Setting ASINCLUDE_DEBUG_MODE=true logs every message regardless of state.
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

from ..config import appsettings

_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<magenta>{extra[unit]: <10}</magenta> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.configure(extra={"unit": "-"})
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState to the logging context.

    Call this at the start of each pipeline run so LOG() calls in the
    classifier, loader and driver see the run's verbosity and unit name.

    Args:
        state: ProgramState instance with verbosity attribute
    """
    _program_state.set(state)


def verbosity_get() -> int:
    """Verbosity of the connected state, 0 when nothing is connected"""
    state = _program_state.get()
    return getattr(state, 'verbosity', 0) if state is not None else 0


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata

    The caller's function and line are reported, not LOG's own.
    """
    if not appsettings.debug_mode and verbosity_get() < level:
        return

    state = _program_state.get()
    unit = getattr(state, 'unitName', '') or '-'
    logger.bind(unit=unit).opt(depth=1).debug(message, **kwargs)
