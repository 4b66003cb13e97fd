"""Generic condition capability shared by all condition plugins.

Plugins compose a ``ConditionBase`` instead of inheriting from it. The base
owns what every condition has in common: the configuration bag, the negate
flag, bound context values and the cache contexts those values vary by.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from condition_core.models import (
    ConditionDefinition,
    ConfigurationForm,
    Context,
    ContextError,
    FormElement,
)

logger = logging.getLogger(__name__)


class ConditionBase:
    """Configuration, negation and context handling for one condition instance."""

    def __init__(
        self,
        definition: ConditionDefinition,
        configuration: Mapping[str, Any] | None = None,
        plugin_defaults: Mapping[str, Any] | None = None,
    ) -> None:
        self.definition = definition
        self.configuration: dict[str, Any] = {
            **self.default_configuration(),
            **(plugin_defaults or {}),
            **(configuration or {}),
        }
        self._contexts: dict[str, Context] = {
            name: Context(definition=ctx_def)
            for name, ctx_def in definition.context.items()
        }

    @property
    def plugin_id(self) -> str:
        return self.definition.id

    @staticmethod
    def default_configuration() -> dict[str, Any]:
        return {"negate": False}

    # -- Negation --------------------------------------------------------------

    def is_negated(self) -> bool:
        return bool(self.configuration.get("negate"))

    def set_negated(self, negate: bool) -> None:
        self.configuration["negate"] = bool(negate)

    def execute(self, evaluate: Callable[[], bool]) -> bool:
        """Run *evaluate* and invert the result when the condition is negated."""
        result = bool(evaluate())
        if self.is_negated():
            result = not result
        logger.debug("Condition %s executed: %s", self.plugin_id, result)
        return result

    # -- Contexts --------------------------------------------------------------

    def set_context_value(
        self, name: str, value: Any, cache_contexts: Iterable[str] = ()
    ) -> None:
        """Bind *value* to the context slot *name* declared by the plugin."""
        context = self._contexts.get(name)
        if context is None:
            raise ContextError(name, f"is not defined by plugin '{self.plugin_id}'")
        self._contexts[name] = Context(
            definition=context.definition,
            value=value,
            cache_contexts=list(cache_contexts),
        )

    def get_context_value(self, name: str) -> Any:
        context = self._contexts.get(name)
        if context is None:
            raise ContextError(name, f"is not defined by plugin '{self.plugin_id}'")
        if not context.has_value() and context.definition.required:
            raise ContextError(name, "is required but has no value")
        return context.value

    def get_cache_contexts(self) -> list[str]:
        """Ordered union of the cache contexts of every bound context."""
        merged: list[str] = []
        for context in self._contexts.values():
            for token in context.cache_contexts:
                if token not in merged:
                    merged.append(token)
        return merged

    # -- Configuration form ----------------------------------------------------

    def build_configuration_form(self, form: ConfigurationForm | None = None) -> ConfigurationForm:
        form = form or ConfigurationForm()
        form.elements.append(
            FormElement(
                name="negate",
                type="checkbox",
                title="Negate the condition",
                default_value=self.is_negated(),
            )
        )
        return form

    def submit_configuration_form(self, values: Mapping[str, Any]) -> None:
        self.set_negated(bool(values.get("negate", False)))
