"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import ConditionsConfig


CONFIG_ENV_VAR = "CONDITIONS_CONFIG"


def load_config(cli_path: str | None = None) -> ConditionsConfig:
    """Load config with resolution order: CLI > $CONDITIONS_CONFIG > project-local > user-global > defaults."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    config_paths = [
        Path(cli_path) if cli_path else None,
        Path(env_path) if env_path else None,
        Path("./conditions.yaml"),
        Path.home() / ".conditions" / "config.yaml",
    ]

    for path in config_paths:
        if path and path.exists():
            try:
                with open(path) as f:
                    raw = yaml.safe_load(f)
                if raw is None:
                    continue
                raw = _expand_env_vars(raw)
                return ConditionsConfig(**raw)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
            except ValidationError as e:
                sections = ", ".join(_failed_sections(e))
                raise ValueError(f"Invalid config in {path} (section: {sections}): {e}") from e

    return ConditionsConfig()


def _failed_sections(error: ValidationError) -> list[str]:
    """Top-level keys that failed validation, in first-seen order."""
    sections: list[str] = []
    for detail in error.errors():
        section = str(detail["loc"][0]) if detail["loc"] else "<root>"
        if section not in sections:
            sections.append(section)
    return sections


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `conditions config init`
DEFAULT_CONFIG_TEMPLATE = """\
# conditions.yaml

# Permission registry (modules, permissions, roles)
registry:
  path: "permissions.yaml"

# Collaborator plugins (entry point names; empty uses the built-in registry)
# plugins:
#   catalog: null
#   resolver: null

# Visibility rule
conditions:
  - plugin: "user_permission"
    configuration:
      permission: "access content"
      negate: false

conjunction: "and"             # and | or

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
