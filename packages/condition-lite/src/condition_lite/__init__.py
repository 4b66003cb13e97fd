"""Condition Lite — file-backed permission catalog, module names and accounts."""

from __future__ import annotations

from condition_lite.account import Account, Role
from condition_lite.registry import (
    Registry,
    StaticModuleResolver,
    StaticPermissionCatalog,
    load_registry,
)

__all__ = [
    "Account",
    "Registry",
    "Role",
    "StaticModuleResolver",
    "StaticPermissionCatalog",
    "load_registry",
]
