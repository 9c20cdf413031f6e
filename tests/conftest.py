"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from access_rules import AccessConfig, AccessManager


@dataclass
class Permission:
    ability_name: str


@dataclass
class User:
    id: int = 1
    role: str | None = "admin"
    permissions: list[Permission] = field(default_factory=list)


@dataclass
class Customer:
    id: int = 2
    role: str | None = None
    permissions: list[Permission] = field(default_factory=list)


GRANTS = {
    "user": {
        "admin": {
            "namespace1": {"ability1": True, "ability2": False},
            "namespace2": {"ability3": True},
        },
        "staff": {
            "namespace1": {"ability1": False, "ability2": True},
            "namespace2": {"ability3": False},
        },
        "primary": {
            "namespace1": {"ability1": True},
        },
    },
    "customer": {
        "primary": {"orders": {"view": True, "refund": False}},
    },
}


@pytest.fixture
def config():
    return AccessConfig(roles_and_permissions=GRANTS)


@pytest.fixture
def docs_config():
    return AccessConfig(
        roles_and_permissions={
            "user": {
                "admin": {"docs": {"read": True, "write": True}},
                "staff": {"docs": {"read": True, "write": False}},
            }
        }
    )


@pytest.fixture
def manager(config):
    return AccessManager(config)


@pytest.fixture
def admin():
    return User(id=1, role="admin")


@pytest.fixture
def staff():
    return User(id=2, role="staff")


@pytest.fixture
def customer():
    return Customer()
