"""Helpers for checking roles against the grant table."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from access_rules.config import AccessConfig


def roles_for(config: AccessConfig, user_type: str) -> list[str]:
    """Return the roles defined for *user_type*, in table order."""
    return list(config.roles_and_permissions.get(str(user_type), {}).keys())


def role_exists(config: AccessConfig, user_type: str, role: str) -> bool:
    return str(role) in roles_for(config, user_type)
