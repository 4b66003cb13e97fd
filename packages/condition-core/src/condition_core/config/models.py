from pydantic import BaseModel, Field
from typing import Any, Literal


class RegistryConfig(BaseModel):
    path: str = "permissions.yaml"


class PluginsConfig(BaseModel):
    catalog: str | None = None
    resolver: str | None = None


class ConditionInstanceConfig(BaseModel):
    plugin: str = "user_permission"
    configuration: dict[str, Any] = Field(default_factory=dict)


class ConditionsConfig(BaseModel):
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    conditions: list[ConditionInstanceConfig] = Field(default_factory=list)
    conjunction: Literal["and", "or"] = "and"
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
