"""Ready-made configuration objects binding a settings record to a source."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Generic, TypeVar

from confloader.adapters.env import parse_env
from confloader.adapters.validator import validate_struct
from confloader.adapters.yaml_file import parse_yaml

SettingsT = TypeVar("SettingsT")


class BaseSource(ABC, Generic[SettingsT]):
    """Validates and prints the wrapped settings record; subclasses register it."""

    def __init__(self, settings: SettingsT, *, skip_validation: bool = False) -> None:
        self.settings = settings
        self.skip_validation = skip_validation

    @abstractmethod
    def register(self) -> None: ...

    def validate(self) -> None:
        if self.skip_validation:
            return
        validate_struct(self.settings)

    def print(self) -> Any:
        return self.settings


class EnvSource(BaseSource[SettingsT]):
    """Populates the record from environment variables."""

    def __init__(
        self,
        settings: SettingsT,
        *,
        prefix: str = "",
        environ: Mapping[str, str] | None = None,
        skip_validation: bool = False,
    ) -> None:
        super().__init__(settings, skip_validation=skip_validation)
        self.prefix = prefix
        self.environ = environ

    def register(self) -> None:
        parse_env(self.settings, environ=self.environ, prefix=self.prefix)


class YamlSource(BaseSource[SettingsT]):
    """Populates the record from a YAML file."""

    def __init__(
        self, settings: SettingsT, path: str | Path, *, skip_validation: bool = False
    ) -> None:
        super().__init__(settings, skip_validation=skip_validation)
        self.path = Path(path)

    def register(self) -> None:
        parse_yaml(self.settings, self.path)
