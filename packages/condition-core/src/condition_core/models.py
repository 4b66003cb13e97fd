"""Plugin definitions, bound contexts and configuration-form models."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ContextError(Exception):
    """Raised when a condition asks for a context that is unknown or unbound."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Context '{name}' {reason}")


class ContextDefinition(BaseModel):
    """Declares a context value a plugin needs at evaluation time."""

    model_config = ConfigDict(frozen=True)

    data_type: str
    label: str
    required: bool = True


class ConditionDefinition(BaseModel):
    """Static metadata for a condition plugin."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    context: dict[str, ContextDefinition] = Field(default_factory=dict)


class Context(BaseModel):
    """A context value bound to a condition, plus the cache contexts it varies by."""

    definition: ContextDefinition
    value: Any = None
    cache_contexts: list[str] = Field(default_factory=list)

    def has_value(self) -> bool:
        return self.value is not None


class FormElement(BaseModel):
    """One widget of a configuration form, rendered by the host."""

    name: str
    type: Literal["select", "checkbox", "textfield"]
    title: str
    description: str = ""
    # Grouped select options: {group label: {value: label}}
    options: dict[str, dict[str, str]] = Field(default_factory=dict)
    default_value: Any = None


class ConfigurationForm(BaseModel):
    """Ordered widgets making up a condition's configuration form."""

    elements: list[FormElement] = Field(default_factory=list)

    def get(self, name: str) -> FormElement | None:
        for element in self.elements:
            if element.name == name:
                return element
        return None
