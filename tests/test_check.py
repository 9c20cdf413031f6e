"""Tests for PermissionCheck."""

import logging

import pytest

from access_rules import (
    AbilityId,
    ConfigurationError,
    PermissionCheck,
    UnknownNamespaceError,
    UnknownRoleError,
    ViolationError,
)

from .conftest import User

# ── query form ───────────────────────────────────────────────


def test_allowed_when_user_has_ability(config, admin):
    assert PermissionCheck.allowed(admin, {"namespace1": "ability1"}, config)


def test_not_allowed_when_user_lacks_ability(config, admin):
    assert not PermissionCheck.allowed(admin, {"namespace1": "ability2"}, config)


def test_no_user_is_never_allowed(config):
    assert PermissionCheck.allowed(None, {"namespace1": "ability1"}, config) is False


@pytest.mark.parametrize(
    "requirement",
    [
        {"namespace1": "ability1"},
        ("namespace1", "ability1"),
        AbilityId("namespace1", "ability1"),
        "namespace1/ability1",
    ],
)
def test_requirement_shapes(config, admin, requirement):
    assert PermissionCheck.allowed(admin, requirement, config)


def test_requirement_with_several_pairs_is_rejected(config, admin):
    with pytest.raises(ConfigurationError):
        PermissionCheck.allowed(admin, {"a": "b", "c": "d"}, config)


def test_resolver_errors_propagate(config, admin):
    with pytest.raises(UnknownNamespaceError):
        PermissionCheck.allowed(admin, {"nope": "ability1"}, config)

    with pytest.raises(UnknownRoleError):
        PermissionCheck.allowed(User(role="ghost"), {"namespace1": "ability1"}, config)


# ── asserting form ───────────────────────────────────────────


def test_require_returns_true(config, admin):
    assert PermissionCheck.require(admin, {"namespace1": "ability1"}, config) is True


def test_require_raises_violation(config, admin):
    with pytest.raises(ViolationError) as exc_info:
        PermissionCheck.require(admin, {"namespace1": "ability2"}, config)
    assert "User with ID 1 cannot do 'namespace1/ability2'" in str(exc_info.value)


def test_require_raises_without_user(config):
    with pytest.raises(ViolationError) as exc_info:
        PermissionCheck.require(None, {"namespace1": "ability1"}, config)
    assert "Unauthenticated user" in str(exc_info.value)


# ── logging ──────────────────────────────────────────────────


def test_outcome_is_logged(config, admin, caplog):
    with caplog.at_level(logging.INFO, logger="access_rules.check"):
        PermissionCheck.allowed(admin, {"namespace1": "ability1"}, config)
        PermissionCheck.allowed(None, {"namespace1": "ability1"}, config)
    assert "User with ID 1 can do 'namespace1/ability1'" in caplog.messages
    assert "Unauthenticated user cannot do 'namespace1/ability1'" in caplog.messages
