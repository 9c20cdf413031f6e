# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Build access configuration and managers from declarative documents.

Handlers cannot be expressed in JSON, so documents refer to them by name
and the factory resolves those names against its handler registry.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from access_rules.config import AccessConfig
from access_rules.exceptions import ConfigurationError, LoaderError
from access_rules.manager import AccessManager
from access_rules.rules import Handler

from .schema import AccessSchema, GrantTableSchema


class AccessFactory:
    """Creates :class:`AccessConfig` and :class:`AccessManager` from configuration.

    Example:
        factory = AccessFactory(handlers={"login": lambda: "/login"})
        schema = factory.from_dict({
            "grants": {"roles_and_permissions": {"user": {"admin": {"docs": {"read": True}}}}},
            "required": [{"rules": ["authenticated_user"], "violation": "redirect", "handler": "login"}],
            "allow": [{"rules": "public", "actions": ["index"]}],
        })
        manager = factory.build_manager(schema)
    """

    def __init__(self, handlers: dict[str, Handler] | None = None) -> None:
        self._handlers: dict[str, Handler] = dict(handlers or {})

    def register_handler(self, name: str, handler: Handler) -> None:
        self._handlers[name] = handler

    # ── parsing ──────────────────────────────────────────────

    @staticmethod
    def from_dict(data: dict[str, Any]) -> AccessSchema:
        try:
            return AccessSchema.model_validate(data)
        except ValidationError as e:
            raise LoaderError(f"Invalid access configuration: {e}") from e

    @classmethod
    def from_json_file(cls, path: str | Path) -> AccessSchema:
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise LoaderError(f"Could not read access configuration '{path}': {e}") from e
        return cls.from_dict(data)

    # ── building ─────────────────────────────────────────────

    @staticmethod
    def build_config(grants: GrantTableSchema) -> AccessConfig:
        return AccessConfig(
            roles_and_permissions=grants.roles_and_permissions,
            role_attribute=grants.role_attribute,
            overrides_attribute=grants.overrides_attribute,
            override_field=grants.override_field,
            current_user_attribute=grants.current_user_attribute,
        )

    def build_manager(
        self,
        schema: AccessSchema,
        config: AccessConfig | None = None,
    ) -> AccessManager:
        """Register every rule of *schema*, in document order, on a new manager.

        Args:
            schema: Parsed access document
            config: Config to attach; built from ``schema.grants`` when omitted

        Raises:
            LoaderError: If a handler name is unknown or a rule is invalid
        """
        manager = AccessManager(config or self.build_config(schema.grants))

        for index, required in enumerate(schema.required):
            self._register(
                f"required[{index}]",
                manager.add_required_rule,
                required.rules,
                violation=required.violation,
                perms=required.perms,
                handler=self._resolve(required.handler),
            )

        for index, allow in enumerate(schema.allow):
            self._register(
                f"allow[{index}]",
                manager.add_allow_rule,
                allow.rules,
                actions=allow.actions,
                perms=allow.perms,
                aliases=allow.aliases,
            )

        manager.configure_no_match(
            schema.no_match.violation, self._resolve(schema.no_match.handler)
        )
        return manager

    @staticmethod
    def _register(where: str, add: Any, rules: Any, **options: Any) -> None:
        try:
            add(rules, **options)
        except LoaderError:
            raise
        except ConfigurationError as e:
            raise LoaderError(f"Invalid rule {where}: {e}") from e

    def _resolve(self, name: str | None) -> Handler | None:
        if name is None:
            return None
        if name not in self._handlers:
            available = ", ".join(sorted(self._handlers)) or "none"
            raise LoaderError(f"Unknown handler: '{name}'. Available handlers: {available}")
        return self._handlers[name]
