"""Evaluator configuration, optionally loaded from a YAML file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path

import yaml

from exprlib.errors import ConfigError

logger = logging.getLogger(__name__)

DIVISION_POLICIES = ("error", "ieee")


@dataclass(frozen=True)
class EvaluatorConfig:
    """Runtime policies of generated evaluators.

    Attributes:
        division_by_zero: ``"error"`` raises ``EvaluationError``; ``"ieee"``
            returns ``inf``, ``-inf`` or ``nan``.
        false_condition_value: Value of ``if`` without ``else`` when the
            condition is false.
        prompt: Prompt shown by the interactive loop.
    """

    division_by_zero: str = "error"
    false_condition_value: float = 0.0
    prompt: str = "Expression> "

    def __post_init__(self) -> None:
        if self.division_by_zero not in DIVISION_POLICIES:
            raise ConfigError(
                f"division_by_zero must be one of {', '.join(DIVISION_POLICIES)}, "
                f"got {self.division_by_zero!r}"
            )
        if isinstance(self.false_condition_value, bool) or not isinstance(
            self.false_condition_value, (int, float)
        ):
            raise ConfigError(
                f"false_condition_value must be a number, got {self.false_condition_value!r}"
            )
        if not isinstance(self.prompt, str):
            raise ConfigError(f"prompt must be a string, got {self.prompt!r}")

    @classmethod
    def from_dict(cls, data: dict) -> EvaluatorConfig:
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(str(key) for key in data if key not in known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)


def load_config(path: str | Path) -> EvaluatorConfig:
    """Load an ``EvaluatorConfig`` from a YAML file.

    An empty file yields the defaults.

    Raises:
        ConfigError: If the file is missing, is not valid YAML, or holds
            unknown keys or bad values.
    """
    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(f"Configuration file not found: {path}") from None
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration in {path} must be a mapping")
    logger.debug("loaded configuration from %s: %r", path, data)
    return EvaluatorConfig.from_dict(data)
