"""
Form profile loader

A profile is a YAML file extending a pipeline without code:

    blacklist:
      - data
    forms:
      using:
        keyword: using
        separator: ","
        description: Bring names into scope

Each declared form is registered as a keyword-led form, the same shape
as the built-in import/export forms.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Union

from .errors import ProfileError


class FormProfile:
    """
    Extra forms and blacklist names loaded from YAML

    Attributes:
        path: Profile file path
        config: Parsed YAML mapping
        forms: Form name -> declaration (keyword, separator, description, aliases)
        blacklist: Names never published
    """

    def __init__(self, path: Union[str, Path]) -> None:
        """
        Load a profile

        Raises:
            ProfileError: If the file is missing, is not valid YAML, or does
                          not have the expected shape
        """
        self.path = Path(path)
        if not self.path.exists():
            raise ProfileError(f"Form profile not found: {self.path}")

        self.config = self._config_load()
        self.forms = self._forms_validate(self.config.get('forms') or {})
        self.blacklist = self._blacklist_validate(self.config.get('blacklist') or [])

    def _config_load(self) -> Dict[str, Any]:
        """Load and parse the YAML file"""
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                config: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ProfileError(f"Failed to parse {self.path.name}: {e}")
        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ProfileError(f"{self.path.name} must contain a mapping")
        return config

    def _forms_validate(self, forms: Any) -> Dict[str, Dict[str, Any]]:
        if not isinstance(forms, dict):
            raise ProfileError("'forms' must map form names to declarations")

        validated: Dict[str, Dict[str, Any]] = {}
        for name, declaration in forms.items():
            if declaration is None:
                declaration = {}
            if not isinstance(declaration, dict):
                raise ProfileError(f"Form '{name}' must be a mapping")
            separator = declaration.get('separator', ',')
            if not isinstance(separator, str):
                raise ProfileError(f"Form '{name}': separator must be a string")
            validated[str(name)] = declaration
        return validated

    def _blacklist_validate(self, names: Any) -> List[str]:
        if not isinstance(names, list):
            raise ProfileError("'blacklist' must be a list of names")
        return [str(name) for name in names]

    def __repr__(self) -> str:
        return f"FormProfile(path='{self.path}', forms={sorted(self.forms)})"
