"""
asinclude - Redefinable units for long-lived Python sessions

Wraps a code block in a module that is rebuilt on every call and
re-publishes its exports into the REPL or notebook namespace, so classes
can be redefined without restarting the session.
"""

__version__ = "1.0.0"

from .lib import (
    asinclude,
    ReloadDriver,
    FormRegistry,
    Blacklist,
    UnknownFormError,
    LOG,
    state_connectToLogger,
)

__all__ = [
    "asinclude",
    "ReloadDriver",
    "FormRegistry",
    "Blacklist",
    "UnknownFormError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
