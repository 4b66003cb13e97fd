"""Tests for UserPermissionCondition — evaluation, summary, options, cache contexts."""

from __future__ import annotations

import pytest

from condition_core.interfaces import Condition, PermissionEntry
from condition_core.models import ContextError
from condition_lite.registry import StaticModuleResolver, StaticPermissionCatalog
from user_permission_condition.condition import UserPermissionCondition


# -- Defaults -----------------------------------------------------------------


def test_default_configuration(make_condition):
    condition = make_condition()
    assert condition.configuration == {"negate": False, "permission": ""}
    assert condition.permission == ""
    assert condition.is_negated() is False


def test_plugin_default_configuration_only_adds_permission():
    assert UserPermissionCondition.default_configuration() == {"permission": ""}


def test_fresh_condition_passes(make_condition, mock_user):
    assert make_condition().evaluate(mock_user) is True
    mock_user.has_permission.assert_not_called()


def test_definition():
    definition = UserPermissionCondition.DEFINITION
    assert definition.id == "user_permission"
    assert definition.label == "User Permission"
    assert definition.context["user"].data_type == "entity:user"
    assert definition.context["user"].required is True


def test_plugin_id_override(catalog, resolver):
    condition = UserPermissionCondition(catalog, resolver, plugin_id="user_permission_alt")
    assert condition.base.plugin_id == "user_permission_alt"


# -- evaluate -----------------------------------------------------------------


@pytest.mark.parametrize("answer", [True, False])
def test_empty_permission_not_negated_always_passes(make_condition, mock_user, answer):
    mock_user.has_permission.return_value = answer
    assert make_condition(permission="").evaluate(mock_user) is True
    mock_user.has_permission.assert_not_called()


@pytest.mark.parametrize("answer", [True, False])
def test_empty_permission_negated_asks_user(make_condition, mock_user, answer):
    mock_user.has_permission.return_value = answer
    condition = make_condition(permission="", negate=True)
    assert condition.evaluate(mock_user) is answer
    mock_user.has_permission.assert_called_once_with("")


@pytest.mark.parametrize("negate", [False, True])
@pytest.mark.parametrize("answer", [True, False])
def test_configured_permission_delegates_to_user(make_condition, mock_user, negate, answer):
    mock_user.has_permission.return_value = answer
    condition = make_condition(permission="access content", negate=negate)
    # evaluate never applies negation itself
    assert condition.evaluate(mock_user) is answer
    mock_user.has_permission.assert_called_once_with("access content")


def test_unknown_permission_is_not_an_error(make_condition, editor):
    assert make_condition(permission="no such thing").evaluate(editor) is False


def test_evaluate_uses_bound_user_context(make_condition, editor):
    condition = make_condition(permission="administer nodes")
    condition.set_context_value("user", editor, cache_contexts=["user"])
    assert condition.evaluate() is True


def test_evaluate_without_user_raises_context_error(make_condition):
    condition = make_condition(permission="access content")
    with pytest.raises(ContextError) as exc_info:
        condition.evaluate()
    assert exc_info.value.name == "user"


def test_evaluate_short_circuit_needs_no_context(make_condition):
    assert make_condition().evaluate() is True


def test_collaborator_errors_propagate(make_condition, mock_user):
    mock_user.has_permission.side_effect = RuntimeError("backend down")
    with pytest.raises(RuntimeError, match="backend down"):
        make_condition(permission="access content").evaluate(mock_user)


# -- execute (negation applied) ----------------------------------------------


def test_execute_applies_negation(make_condition, editor):
    plain = make_condition(permission="access content")
    negated = make_condition(permission="access content", negate=True)
    for condition in (plain, negated):
        condition.set_context_value("user", editor)
    assert plain.execute() is True
    assert negated.execute() is False


def test_execute_negated_empty_permission(make_condition, editor):
    condition = make_condition(permission="", negate=True)
    condition.set_context_value("user", editor)
    # has_permission("") is False for the editor, then negated
    assert condition.execute() is True


# -- summary ------------------------------------------------------------------


def test_summary_not_negated(make_condition):
    condition = make_condition(permission="access content")
    assert condition.summary() == 'The user has the permission "access content"'


def test_summary_negated(make_condition):
    condition = make_condition(permission="access content", negate=True)
    assert condition.summary() == 'The user does not have the permission "access content"'


def test_summary_empty_permission(make_condition):
    assert make_condition().summary() == 'The user has the permission ""'


# -- get_cache_contexts -------------------------------------------------------


def test_cache_contexts_replace_user(make_condition):
    result = make_condition().get_cache_contexts(["user", "route", "url"])
    assert result == ["user.permissions", "route", "url"]


def test_cache_contexts_leave_other_tokens(make_condition):
    tokens = ["user.roles", "route", "languages:language_interface"]
    assert make_condition().get_cache_contexts(tokens) == tokens


def test_cache_contexts_empty(make_condition):
    assert make_condition().get_cache_contexts([]) == []


def test_cache_contexts_from_bound_contexts(make_condition, editor):
    condition = make_condition(permission="access content")
    assert condition.get_cache_contexts() == []
    condition.set_context_value("user", editor, cache_contexts=["user", "session"])
    assert condition.get_cache_contexts() == ["user.permissions", "session"]


# -- build_options ------------------------------------------------------------


def test_build_options_groups_and_strips(make_condition):
    assert make_condition().build_options() == {"Module One": {"a": "Do A", "b": "Do B"}}


def test_build_options_follows_catalog_order():
    catalog = StaticPermissionCatalog([
        PermissionEntry(id="z", title="Zed", provider="second"),
        PermissionEntry(id="m", title="Em", provider="first"),
        PermissionEntry(id="a", title="Ay", provider="second"),
    ])
    resolver = StaticModuleResolver({"first": "First", "second": "Second"})
    options = UserPermissionCondition(catalog, resolver).build_options()
    assert list(options) == ["Second", "First"]
    assert list(options["Second"]) == ["z", "a"]


def test_build_options_groups_by_display_name():
    catalog = StaticPermissionCatalog([
        PermissionEntry(id="a", title="A", provider="p1"),
        PermissionEntry(id="b", title="B", provider="p2"),
    ])
    resolver = StaticModuleResolver({"p1": "Shared", "p2": "Shared"})
    options = UserPermissionCondition(catalog, resolver).build_options()
    assert options == {"Shared": {"a": "A", "b": "B"}}


def test_build_options_empty_catalog(resolver):
    condition = UserPermissionCondition(StaticPermissionCatalog(), resolver)
    assert condition.build_options() == {}


# -- Configuration form -------------------------------------------------------


def test_configure_does_not_validate(make_condition):
    condition = make_condition()
    condition.configure("not in catalog")
    assert condition.permission == "not in catalog"


def test_configuration_form(make_condition):
    form = make_condition(permission="b").build_configuration_form()
    assert [e.name for e in form.elements] == ["permission", "negate"]

    select = form.get("permission")
    assert select.type == "select"
    assert select.title == "Permission"
    assert select.options == {"Module One": {"a": "Do A", "b": "Do B"}}
    assert select.default_value == "b"

    checkbox = form.get("negate")
    assert checkbox.type == "checkbox"
    assert checkbox.default_value is False


def test_submit_configuration_form(make_condition):
    condition = make_condition()
    condition.submit_configuration_form({"permission": "a", "negate": True})
    assert condition.configuration == {"negate": True, "permission": "a"}


def test_submit_configuration_form_missing_values(make_condition):
    condition = make_condition(permission="a", negate=True)
    condition.submit_configuration_form({})
    assert condition.permission == ""
    assert condition.is_negated() is False


# -- Factory and protocol -----------------------------------------------------


def test_create_from_services(services):
    condition = UserPermissionCondition.create(services, {"permission": "a"})
    assert condition.permission == "a"
    assert condition.build_options() == {"Module One": {"a": "Do A", "b": "Do B"}}


def test_protocol_conformance(make_condition):
    assert isinstance(make_condition(), Condition)
