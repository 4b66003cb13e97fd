"""Condition Core - interfaces and shared behaviour for visibility condition plugins."""

from condition_core.base import ConditionBase
from condition_core.config import ConditionsConfig, load_config
from condition_core.interfaces import (
    Condition,
    ConditionServices,
    ModuleResolver,
    PermissionCatalog,
    PermissionEntry,
    UserContext,
)
from condition_core.models import (
    ConditionDefinition,
    ConfigurationForm,
    Context,
    ContextDefinition,
    ContextError,
    FormElement,
)
from condition_core.resolver import resolve_conditions
from condition_core.text import strip_tags

__version__ = "0.1.0"

__all__ = [
    "Condition",
    "ConditionBase",
    "ConditionDefinition",
    "ConditionServices",
    "ConditionsConfig",
    "ConfigurationForm",
    "Context",
    "ContextDefinition",
    "ContextError",
    "FormElement",
    "ModuleResolver",
    "PermissionCatalog",
    "PermissionEntry",
    "UserContext",
    "load_config",
    "resolve_conditions",
    "strip_tags",
]
