# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Data transfer objects for declarative access configuration.

These Pydantic models describe the shape of an access configuration
document (usually JSON) and validate it before any rule is registered.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from access_rules.rules import ViolationKind

# token | [token, ...] | {"all": [...]} | {"any": [...]}
RulesField = str | list[str | list[str]] | dict[str, list[str | list[str]]]

# {namespace: name | [names]}
PermsField = dict[str, str | list[str]]


class AllowRuleSchema(BaseModel):
    """One allow rule.

    Attributes:
        rules:   Rule tokens or an ``all``/``any`` rule set.
        actions: Actions the rule admits (``"all"`` for every action).
        aliases: Names the rule can be checked by with ``allow``.
        perms:   Abilities the user must hold for the rule to pass.
    """

    model_config = ConfigDict(extra="forbid")

    rules: RulesField
    actions: list[str] = Field(default_factory=list)
    aliases: list[str] = Field(default_factory=list)
    perms: PermsField = Field(default_factory=dict)


class RequiredRuleSchema(BaseModel):
    """One required rule.

    Attributes:
        rules:     Rule tokens or an ``all``/``any`` rule set.
        violation: Violation kind reported when the rule fails.
        perms:     Abilities the user must hold for the rule to pass.
        handler:   Name of a handler in the factory's handler registry.
    """

    model_config = ConfigDict(extra="forbid")

    rules: RulesField
    violation: ViolationKind = ViolationKind.SEVERE
    perms: PermsField = Field(default_factory=dict)
    handler: str | None = None


class NoMatchSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    violation: ViolationKind = ViolationKind.SEVERE
    handler: str | None = None


class GrantTableSchema(BaseModel):
    """The role grant table plus how user objects are read.

    Attributes:
        roles_and_permissions: ``user_type -> role -> namespace -> ability -> bool``.
        role_attribute:        User attribute holding the role.
        overrides_attribute:   User attribute holding override records.
        override_field:        Field of an override record with its identifier.
    """

    model_config = ConfigDict(extra="forbid")

    roles_and_permissions: dict[str, dict[str, dict[str, dict[str, bool]]]] = Field(
        default_factory=dict
    )
    role_attribute: str = "role"
    overrides_attribute: str = "permissions"
    override_field: str = "ability_name"
    current_user_attribute: str = "current_user"

    @field_validator("roles_and_permissions")
    @classmethod
    def no_blank_keys(cls, value: dict[str, Any]) -> dict[str, Any]:
        for user_type, roles in value.items():
            for role, namespaces in roles.items():
                for namespace, abilities in namespaces.items():
                    for key in (user_type, role, namespace, *abilities):
                        if not key.strip():
                            raise ValueError(
                                f"Blank key in grant table under {user_type}/{role}/{namespace}"
                            )
        return value


class AccessSchema(BaseModel):
    """A complete access configuration document.

    Attributes:
        grants:   The role grant table section.
        required: Required rules, in evaluation order.
        allow:    Allow rules, in evaluation order.
        no_match: Fallback violation when no allow rule matches.
    """

    model_config = ConfigDict(extra="forbid")

    grants: GrantTableSchema = Field(default_factory=GrantTableSchema)
    required: list[RequiredRuleSchema] = Field(default_factory=list)
    allow: list[AllowRuleSchema] = Field(default_factory=list)
    no_match: NoMatchSchema = Field(default_factory=NoMatchSchema)
