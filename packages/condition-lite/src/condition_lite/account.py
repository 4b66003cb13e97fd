"""Role-based user accounts usable as a condition's ``user`` context."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Role(BaseModel):
    """A named set of permissions. Admin roles hold every permission."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str = ""
    permissions: list[str] = Field(default_factory=list)
    is_admin: bool = False


class Account(BaseModel):
    """A user identified by name, holding the union of its roles' permissions."""

    name: str = "anonymous"
    roles: list[Role] = Field(default_factory=list)

    def has_permission(self, permission: str) -> bool:
        return any(role.is_admin or permission in role.permissions for role in self.roles)

    def get_permissions(self) -> set[str]:
        granted: set[str] = set()
        for role in self.roles:
            granted.update(role.permissions)
        return granted
