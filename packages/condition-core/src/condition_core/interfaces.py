"""Collaborator interfaces consumed by condition plugins."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict


class PermissionEntry(BaseModel):
    """A permission registered by a provider module."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    provider: str


@runtime_checkable
class PermissionCatalog(Protocol):
    """Full catalog of permissions known to the host."""

    def get_permissions(self) -> list[PermissionEntry]: ...


@runtime_checkable
class ModuleResolver(Protocol):
    """Maps a provider id to a human-readable module name."""

    def get_name(self, provider: str) -> str: ...


@runtime_checkable
class UserContext(Protocol):
    """The user a condition is evaluated against."""

    def has_permission(self, permission: str) -> bool: ...


@runtime_checkable
class Condition(Protocol):
    """A boolean visibility rule."""

    def evaluate(self, user: UserContext | None = None) -> bool: ...

    def execute(self) -> bool: ...

    def set_context_value(self, name: str, value: Any, cache_contexts: Iterable[str] = ()) -> None: ...

    def summary(self) -> str: ...

    def get_cache_contexts(self, base_contexts: Iterable[str] | None = None) -> list[str]: ...

    def default_configuration(self) -> dict[str, Any]: ...

    def submit_configuration_form(self, values: Mapping[str, Any]) -> None: ...


@dataclass(frozen=True)
class ConditionServices:
    """Collaborators handed to a plugin factory by the composition root."""

    catalog: PermissionCatalog
    resolver: ModuleResolver
