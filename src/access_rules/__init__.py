"""access_rules — per-action access control from declarative rules.

Required rules gate every action in registration order; the first failure
wins.  Allow rules then admit the action when any one of them passes.
Abilities come from a role grant table with per-user overrides layered on
top.
"""

from access_rules.abilities import AbilityId, parse_qualified_name, qualified_name
from access_rules.check import PermissionCheck
from access_rules.config import DEFAULT_ROLE, AccessConfig
from access_rules.context import MethodPredicates, PredicateMap, RuleContext
from access_rules.controlled import AccessControlled
from access_rules.exceptions import (
    AccessDeniedError,
    AccessError,
    ConfigurationError,
    LoaderError,
    MalformedAbilityIdentifierError,
    UnimplementedRuleError,
    UnknownNamespaceError,
    UnknownRoleError,
    UnknownUserTypeError,
    ViolationError,
)
from access_rules.manager import AccessManager
from access_rules.resolver import AbilityResolver
from access_rules.roles import role_exists, roles_for
from access_rules.rules import AllowRule, RequiredRule, RuleSet, Violation, ViolationKind

__all__ = [
    "DEFAULT_ROLE",
    "AbilityId",
    "AbilityResolver",
    "AccessConfig",
    "AccessControlled",
    "AccessDeniedError",
    "AccessError",
    "AccessManager",
    "AllowRule",
    "ConfigurationError",
    "LoaderError",
    "MalformedAbilityIdentifierError",
    "MethodPredicates",
    "PermissionCheck",
    "PredicateMap",
    "RequiredRule",
    "RuleContext",
    "RuleSet",
    "UnimplementedRuleError",
    "UnknownNamespaceError",
    "UnknownRoleError",
    "UnknownUserTypeError",
    "Violation",
    "ViolationError",
    "ViolationKind",
    "parse_qualified_name",
    "qualified_name",
    "role_exists",
    "roles_for",
]
