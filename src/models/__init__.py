"""
Models package for asinclude

Contains data structures and type definitions for the reload pipeline.
"""

from .state import ProgramState, pipeline
from .forms import FormSpec, FormCategory
from .unit import Snippet, SpecialFormEntry, UnitDefinition, PublishEntry

__all__ = [
    "ProgramState",
    "pipeline",
    "FormSpec",
    "FormCategory",
    "Snippet",
    "SpecialFormEntry",
    "UnitDefinition",
    "PublishEntry",
]
