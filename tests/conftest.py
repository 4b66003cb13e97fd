"""Shared test fixtures for the permission condition."""

import pytest
from unittest.mock import MagicMock

from condition_core.config.models import ConditionsConfig
from condition_core.interfaces import ConditionServices, PermissionEntry, UserContext
from condition_lite.account import Account, Role
from condition_lite.registry import StaticModuleResolver, StaticPermissionCatalog
from user_permission_condition.condition import UserPermissionCondition


REGISTRY_YAML = """\
modules:
  node: Node
  system: System
permissions:
  access content:
    title: "<em>View</em> published content"
    provider: node
  administer nodes:
    title: Administer content
    provider: node
  administer site configuration:
    title: Administer site configuration
    provider: system
roles:
  editor:
    label: Editor
    permissions: [access content, administer nodes]
  administrator:
    label: Administrator
    is_admin: true
"""


@pytest.fixture
def sample_entries():
    return [
        PermissionEntry(id="a", title="<b>Do A</b>", provider="mod1"),
        PermissionEntry(id="b", title="Do B", provider="mod1"),
    ]


@pytest.fixture
def catalog(sample_entries):
    return StaticPermissionCatalog(sample_entries)


@pytest.fixture
def resolver():
    return StaticModuleResolver({"mod1": "Module One"})


@pytest.fixture
def services(catalog, resolver):
    return ConditionServices(catalog=catalog, resolver=resolver)


@pytest.fixture
def make_condition(catalog, resolver):
    def _make(**configuration) -> UserPermissionCondition:
        return UserPermissionCondition(catalog, resolver, configuration or None)
    return _make


@pytest.fixture
def mock_user():
    """User context whose answers are controlled per test."""
    user = MagicMock(spec=UserContext)
    user.has_permission.return_value = False
    return user


@pytest.fixture
def editor():
    return Account(
        name="erin",
        roles=[Role(id="editor", permissions=["access content", "administer nodes"])],
    )


@pytest.fixture
def sample_config():
    return ConditionsConfig()


@pytest.fixture
def registry_file(tmp_path):
    path = tmp_path / "permissions.yaml"
    path.write_text(REGISTRY_YAML)
    return path
