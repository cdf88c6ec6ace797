"""
Exceptions raised by asinclude

Load-time failures (SyntaxError, exceptions raised by unit code) and file
errors (OSError) are not wrapped; they reach the caller unchanged.
"""


class AsincludeError(Exception):
    """Base class for errors raised by asinclude itself"""
    pass


class UnknownFormError(AsincludeError, KeyError):
    """Raised when a corrupted special form has no registry entry"""

    def __init__(self, form_name: str, line: str = "") -> None:
        self.form_name = form_name
        self.line = line
        super().__init__(form_name)

    def __str__(self) -> str:
        message = f"No special form handler registered for '{self.form_name}'"
        if self.line:
            message += f" (line: {self.line.strip()!r})"
        return message


class ArtifactFormatError(AsincludeError):
    """Raised when an artifact lacks a well-formed unit declaration"""
    pass


class ProfileError(AsincludeError):
    """Raised when a form profile cannot be loaded or validated"""
    pass
