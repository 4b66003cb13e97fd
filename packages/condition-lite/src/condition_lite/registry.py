"""File-backed permission registry: modules, permissions and roles from YAML.

Example ``permissions.yaml``::

    modules:
      node: Node
    permissions:
      access content:
        title: View published content
        provider: node
    roles:
      editor:
        label: Editor
        permissions: [access content]
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from condition_core.interfaces import PermissionEntry
from condition_lite.account import Role

logger = logging.getLogger(__name__)


class PermissionDefinition(BaseModel):
    title: str
    provider: str


class Registry(BaseModel):
    """Parsed contents of a registry file."""

    modules: dict[str, str] = Field(default_factory=dict)
    permissions: dict[str, PermissionDefinition] = Field(default_factory=dict)
    roles: dict[str, Role] = Field(default_factory=dict)

    def entries(self) -> list[PermissionEntry]:
        return [
            PermissionEntry(id=perm_id, title=perm.title, provider=perm.provider)
            for perm_id, perm in self.permissions.items()
        ]


def load_registry(path: str | Path) -> Registry:
    """Read and validate a registry file. Missing sections default to empty."""
    path = Path(path)
    if not path.is_file():
        raise ValueError(f"Registry file not found: {path}")
    try:
        raw = yaml.safe_load(path.read_text()) or {}
        roles = raw.get("roles") or {}
        # Role ids come from the mapping keys
        raw["roles"] = {
            role_id: {"id": role_id, **(fields or {})} for role_id, fields in roles.items()
        }
        registry = Registry(**raw)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    except (ValidationError, AttributeError, TypeError) as e:
        raise ValueError(f"Invalid registry in {path}: {e}") from e

    logger.debug(
        "Loaded registry %s: %d modules, %d permissions, %d roles",
        path,
        len(registry.modules),
        len(registry.permissions),
        len(registry.roles),
    )
    return registry


class StaticPermissionCatalog:
    """Permission catalog over a fixed list of entries, kept in insertion order."""

    def __init__(self, entries: Iterable[PermissionEntry] = ()) -> None:
        self._entries = list(entries)

    @classmethod
    def from_file(cls, path: str | Path) -> StaticPermissionCatalog:
        return cls(load_registry(path).entries())

    def get_permissions(self) -> list[PermissionEntry]:
        return list(self._entries)


class StaticModuleResolver:
    """Module names from a fixed mapping. Unknown providers resolve to their own id."""

    def __init__(self, names: Mapping[str, str] | None = None) -> None:
        self._names = dict(names or {})

    @classmethod
    def from_file(cls, path: str | Path) -> StaticModuleResolver:
        return cls(load_registry(path).modules)

    def get_name(self, provider: str) -> str:
        return self._names.get(provider, provider)
