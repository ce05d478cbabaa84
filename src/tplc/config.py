"""Configuration for tplc.

A config file is optional YAML:

    names:
      runtime: runtime        # parameter the generated code receives
      commands: commands      # command table attribute
      is_empty: is_empty
      are_all_equal: are_all_equal
      elements: elements
      set: set                # variable binding, looked up on the command table
    negation_marker: not
    entrypoint: render
"""

from __future__ import annotations

import keyword
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from tplc.errors import ConfigError


def is_name(value: str) -> bool:
    """Whether value can be used as a Python variable name."""
    return value.isidentifier() and not keyword.iskeyword(value)


class RuntimeNames(BaseModel):
    """Identifiers the generated code uses to reach the runtime."""

    model_config = {"frozen": True}

    runtime: str = Field(default="runtime", description="Runtime object name")
    commands: str = Field(default="commands", description="Command table attribute")
    is_empty: str = Field(default="is_empty", description="Emptiness predicate")
    are_all_equal: str = Field(
        default="are_all_equal", description="Equality predicate"
    )
    elements: str = Field(default="elements", description="Sequence materializer")
    set: str = Field(default="set", description="Variable binding on the command table")

    @field_validator("*")
    @classmethod
    def check_identifier(cls, value: str) -> str:
        if not is_name(value):
            raise ValueError(f"not a valid identifier: {value!r}")
        return value

    @field_validator("runtime")
    @classmethod
    def check_runtime(cls, value: str) -> str:
        # loop lambdas bind underscore-prefixed locals
        if value.startswith("_"):
            raise ValueError(f"runtime name must not start with '_': {value!r}")
        return value

    @property
    def command_table(self) -> str:
        return f"{self.runtime}.{self.commands}"

    @property
    def is_empty_ref(self) -> str:
        return f"{self.runtime}.{self.is_empty}"

    @property
    def are_all_equal_ref(self) -> str:
        return f"{self.runtime}.{self.are_all_equal}"

    @property
    def elements_ref(self) -> str:
        return f"{self.runtime}.{self.elements}"

    @property
    def set_ref(self) -> str:
        return f"{self.command_table}.{self.set}"


DEFAULT_NAMES = RuntimeNames()


class CompilerConfig(BaseModel):
    """Main tplc configuration."""

    names: RuntimeNames = Field(default_factory=RuntimeNames)
    negation_marker: str = Field(
        default="not", description="Leading condition token that negates it"
    )
    entrypoint: str = Field(
        default="render", description="Function name of the rendered module"
    )

    @field_validator("entrypoint")
    @classmethod
    def check_entrypoint(cls, value: str) -> str:
        if not is_name(value):
            raise ValueError(f"entrypoint is not a valid identifier: {value!r}")
        return value


def load_config(path: Path) -> CompilerConfig:
    """Load a tplc config file from path."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse config {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping at the top level")

    return CompilerConfig.model_validate(data)
