"""User permission condition plugin."""

from user_permission_condition.condition import UserPermissionCondition

__all__ = ["UserPermissionCondition"]
