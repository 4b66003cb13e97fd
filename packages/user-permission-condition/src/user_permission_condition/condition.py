"""Condition that passes when the user holds a configured permission."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from condition_core.base import ConditionBase
from condition_core.interfaces import (
    ConditionServices,
    ModuleResolver,
    PermissionCatalog,
    UserContext,
)
from condition_core.models import (
    ConditionDefinition,
    ConfigurationForm,
    ContextDefinition,
    FormElement,
)
from condition_core.text import strip_tags

logger = logging.getLogger(__name__)


class UserPermissionCondition:
    """Checks whether the ``user`` context has the configured permission.

    Configuration keys: ``permission`` (empty means none selected) and the
    shared ``negate`` flag.
    """

    DEFINITION = ConditionDefinition(
        id="user_permission",
        label="User Permission",
        context={"user": ContextDefinition(data_type="entity:user", label="User")},
    )

    def __init__(
        self,
        catalog: PermissionCatalog,
        resolver: ModuleResolver,
        configuration: Mapping[str, Any] | None = None,
        plugin_id: str | None = None,
    ) -> None:
        definition = self.DEFINITION
        if plugin_id is not None and plugin_id != definition.id:
            definition = definition.model_copy(update={"id": plugin_id})
        self._catalog = catalog
        self._resolver = resolver
        self._base = ConditionBase(definition, configuration, self.default_configuration())

    @classmethod
    def create(
        cls,
        services: ConditionServices,
        configuration: Mapping[str, Any] | None = None,
        plugin_id: str | None = None,
    ) -> UserPermissionCondition:
        return cls(services.catalog, services.resolver, configuration, plugin_id)

    # -- Configuration ---------------------------------------------------------

    @property
    def base(self) -> ConditionBase:
        return self._base

    @property
    def configuration(self) -> dict[str, Any]:
        return self._base.configuration

    @property
    def permission(self) -> str:
        return self._base.configuration.get("permission") or ""

    def is_negated(self) -> bool:
        return self._base.is_negated()

    @staticmethod
    def default_configuration() -> dict[str, Any]:
        return {"permission": ""}

    def configure(self, permission: str) -> None:
        self._base.configuration["permission"] = permission
        logger.debug("%s configured with permission %r", self._base.plugin_id, permission)

    def build_options(self) -> dict[str, dict[str, str]]:
        """Permission titles grouped by the display name of their provider."""
        options: dict[str, dict[str, str]] = {}
        for entry in self._catalog.get_permissions():
            display_name = self._resolver.get_name(entry.provider)
            options.setdefault(display_name, {})[entry.id] = strip_tags(entry.title)
        return options

    def build_configuration_form(self) -> ConfigurationForm:
        form = ConfigurationForm(
            elements=[
                FormElement(
                    name="permission",
                    type="select",
                    title="Permission",
                    description=(
                        "Only users with the selected permission flag will be able "
                        "to access this display."
                    ),
                    options=self.build_options(),
                    default_value=self.permission,
                )
            ]
        )
        return self._base.build_configuration_form(form)

    def submit_configuration_form(self, values: Mapping[str, Any]) -> None:
        self.configure(values.get("permission") or "")
        self._base.submit_configuration_form(values)

    # -- Evaluation ------------------------------------------------------------

    def summary(self) -> str:
        if self.is_negated():
            return f'The user does not have the permission "{self.permission}"'
        return f'The user has the permission "{self.permission}"'

    def evaluate(self, user: UserContext | None = None) -> bool:
        permission = self.permission
        # Only the non-negated case short-circuits; a negated empty permission
        # is still asked of the user.
        if not permission and not self.is_negated():
            return True
        if user is None:
            user = self._base.get_context_value("user")
        return user.has_permission(permission)

    def set_context_value(self, name: str, value: Any, cache_contexts: Iterable[str] = ()) -> None:
        self._base.set_context_value(name, value, cache_contexts)

    def execute(self) -> bool:
        return self._base.execute(self.evaluate)

    def get_cache_contexts(self, base_contexts: Iterable[str] | None = None) -> list[str]:
        # Only the user's permissions matter here, not the full user identity.
        if base_contexts is None:
            base_contexts = self._base.get_cache_contexts()
        return ["user.permissions" if context == "user" else context for context in base_contexts]
