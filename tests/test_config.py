"""Tests for AccessConfig and the role helpers."""

from dataclasses import dataclass
from enum import Enum

from access_rules import AccessConfig, role_exists, roles_for
from access_rules.config import underscore

from .conftest import Permission, User

# ── user introspection ───────────────────────────────────────


def test_underscore():
    assert underscore("User") == "user"
    assert underscore("AdminUser") == "admin_user"
    assert underscore("HTTPClient") == "http_client"


def test_user_type_defaults_to_class_name(config):
    assert config.user_type_of(User()) == "user"


def test_user_type_callable():
    config = AccessConfig(user_type=lambda u: "robot")
    assert config.user_type_of(User()) == "robot"


def test_blank_role_defaults_to_primary(config):
    assert config.role_of(User(role=None)) == "primary"
    assert config.role_of(User(role="")) == "primary"
    assert config.role_of(User(role="staff")) == "staff"


def test_role_read_from_method_and_enum():
    class Role(Enum):
        ADMIN = "admin"

    class Account:
        def kind(self):
            return Role.ADMIN

    config = AccessConfig(role_attribute="kind")
    assert config.role_of(Account()) == "admin"


def test_overrides_accept_records_mappings_and_strings():
    @dataclass
    class Member:
        grants: list

    config = AccessConfig(overrides_attribute="grants")
    member = Member(grants=[Permission("a/b"), {"ability_name": "c/d"}, "e/f"])
    assert config.overrides_of(member) == ["a/b", "c/d", "e/f"]


def test_missing_overrides_attribute_is_empty(config):
    class Bare:
        role = "admin"

    assert config.overrides_of(Bare()) == []


def test_replace_returns_independent_copy(config):
    other = config.replace(role_attribute="level")
    assert other.role_attribute == "level"
    assert config.role_attribute == "role"


# ── roles ────────────────────────────────────────────────────


def test_roles_for(config):
    assert roles_for(config, "user") == ["admin", "staff", "primary"]
    assert roles_for(config, "customer") == ["primary"]
    assert roles_for(config, "missing") == []


def test_role_exists(config):
    assert role_exists(config, "user", "admin")
    assert role_exists(config, "customer", "primary")
    assert not role_exists(config, "user", "missing")
    assert not role_exists(config, "missing", "admin")
