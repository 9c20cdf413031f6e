"""Custom exceptions for the access_rules package."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from access_rules.rules import Violation


class AccessError(Exception):
    """Base exception for all access-related errors."""


# ── setup-time ───────────────────────────────────────────────


class ConfigurationError(AccessError):
    """Raised when rules or the grant table are misconfigured."""


class MalformedAbilityIdentifierError(ConfigurationError):
    """Raised when an ability identifier is not of the form ``namespace/name``."""

    def __init__(self, value: str, message: str = "") -> None:
        self.value = value
        super().__init__(
            message or f"Ability identifier must have a namespace and a name (was '{value}')"
        )


class LoaderError(ConfigurationError):
    """Raised when a declarative access configuration cannot be loaded."""


# ── schema gaps (per call) ───────────────────────────────────


class UnknownUserTypeError(AccessError):
    """Raised when a user type has no entry in the role grant table."""

    def __init__(self, user_type: str) -> None:
        self.user_type = user_type
        super().__init__(f"User type ({user_type}) has no permissions defined")


class UnknownRoleError(AccessError):
    """Raised when a role has no entry for its user type."""

    def __init__(self, user_type: str, role: str) -> None:
        self.user_type = user_type
        self.role = role
        super().__init__(f"Role ({role}) for user type ({user_type}) has no permissions defined")


class UnknownNamespaceError(AccessError):
    """Raised when an ability namespace is not part of the resolved grants."""

    def __init__(self, namespace: str) -> None:
        self.namespace = namespace
        super().__init__(f"Permission namespace unknown: {namespace}")


class UnimplementedRuleError(AccessError):
    """Raised when a custom rule token has no predicate on the rule context."""

    def __init__(self, token: str, detail: str = "") -> None:
        self.token = token
        msg = f"Rule '{token}' is not implemented"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


# ── denials ──────────────────────────────────────────────────


class ViolationError(AccessError):
    """Raised by the asserting form of a permission check when the ability is absent."""


class AccessDeniedError(AccessError):
    """Raised by :meth:`AccessControlled.authorize` when an action is denied."""

    def __init__(self, violation: Violation, action: str = "") -> None:
        self.violation = violation
        self.action = action
        msg = f"Access denied ({violation.kind.value})"
        if action:
            msg += f" for action '{action}'"
        super().__init__(msg)
