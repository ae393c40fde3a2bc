"""
Interface to configuration as persisted in .yaml file.
"""
from __future__ import annotations

import importlib
import logging
from typing import Any

from pydantic import field_validator

from ..core import MirrorDelegate
from .yaml_model import BaseYamlModel

__all__ = [
    "Config",
    "DEFAULT_CONFIG_FILE",
]

DEFAULT_CONFIG_FILE = "tree-mirror.yaml"
"""
Config file used if it exists and none is passed explicitly.
"""


class Config(BaseYamlModel):
    """
    Encapsulates configuration for use in tools.
    """

    log_level: str = "INFO"
    """
    Name of logging level, e.g. `DEBUG`.
    """

    delegate: str | None = None
    """
    Fully-qualified class name of {obj}`MirrorDelegate` subclass to use when
    replaying, e.g. `my_pkg.delegates.NoScriptDelegate`.
    """

    @field_validator("log_level", mode="before")
    def validate_log_level(cls, value: Any) -> Any:
        if not isinstance(value, str):
            # let pydantic handle type error
            return value

        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: '{value}'")

        return level

    @field_validator("delegate")
    def validate_delegate(cls, value: str | None) -> str | None:
        if value is not None and not "." in value:
            raise ValueError(
                f"fully-qualified class name '{value}' must contain at least one '.'"
            )
        return value

    def create_delegate(self) -> MirrorDelegate | None:
        """
        Import and instantiate configured delegate, or `None` if not
        configured.
        """
        if self.delegate is None:
            return None

        module_path, obj_name = self.delegate.rsplit(".", 1)

        try:
            module = importlib.import_module(module_path)
            delegate_cls = getattr(module, obj_name)
        except (ImportError, AttributeError) as e:
            raise ValueError(f"failed to import '{self.delegate}': {e}")

        if not (
            isinstance(delegate_cls, type)
            and issubclass(delegate_cls, MirrorDelegate)
        ):
            raise ValueError(
                f"fully-qualified class name '{self.delegate}' is not a MirrorDelegate subclass: {delegate_cls}"
            )

        return delegate_cls()
