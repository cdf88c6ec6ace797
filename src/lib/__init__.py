"""
asinclude - Redefinable units for long-lived Python sessions

Relocates a re-rendered code block into a freshly loaded module and
re-publishes its exports into the session namespace.
"""

__version__ = "1.0.0"

from .forms import FormRegistry
from .classifier import LineClassifier
from .extractor import BlockExtractor
from .wrapper import unit_wrap
from .loader import PythonUnitLoader
from .driver import ReloadDriver, Blacklist, asinclude, driver_default
from .errors import AsincludeError, UnknownFormError, ArtifactFormatError, ProfileError
from .log import LOG, state_connectToLogger

__all__ = [
    "FormRegistry",
    "LineClassifier",
    "BlockExtractor",
    "unit_wrap",
    "PythonUnitLoader",
    "ReloadDriver",
    "Blacklist",
    "asinclude",
    "driver_default",
    "AsincludeError",
    "UnknownFormError",
    "ArtifactFormatError",
    "ProfileError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
