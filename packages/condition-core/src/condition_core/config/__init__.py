from .loader import load_config
from .models import (
    ConditionInstanceConfig,
    ConditionsConfig,
    PluginsConfig,
    RegistryConfig,
)

__all__ = [
    "ConditionInstanceConfig",
    "ConditionsConfig",
    "PluginsConfig",
    "RegistryConfig",
    "load_config",
]
