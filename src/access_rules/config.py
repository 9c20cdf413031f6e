"""AccessConfig — the role grant table plus how to read users."""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

# user_type -> role -> namespace -> ability_name -> granted
GrantTable = dict[str, dict[str, dict[str, dict[str, bool]]]]

DEFAULT_ROLE = "primary"

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def underscore(name: str) -> str:
    """``AdminUser`` -> ``admin_user``."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def read_attribute(obj: Any, attribute: str) -> Any:
    """Read an attribute, calling it when it is a method."""
    value = getattr(obj, attribute, None)
    if callable(value):
        value = value()
    return value


@dataclass
class AccessConfig:
    """Process-wide access configuration, passed explicitly to the engine.

    The host builds one at startup (or per test) and treats it as read-only
    while requests are being evaluated.

    Attributes:
        roles_and_permissions: The role grant table.  It is also the schema
                               of known abilities: nothing outside it can
                               ever be granted.
        role_attribute:        User attribute (or method) holding the role.
        overrides_attribute:   User attribute (or method) holding the
                               per-user override records.
        override_field:        Attribute or key on an override record that
                               holds its ``"namespace/name"`` identifier.
        user_type:             Optional ``user -> str`` callable.  Defaults
                               to the snake_case name of the user's class.
        current_user_attribute: Attribute (or method) the scoped DSL reads
                               the current user from.
    """

    roles_and_permissions: GrantTable = field(default_factory=dict)
    role_attribute: str = "role"
    overrides_attribute: str = "permissions"
    override_field: str = "ability_name"
    user_type: Callable[[Any], str] | None = None
    current_user_attribute: str = "current_user"

    # ── user introspection ───────────────────────────────────

    def user_type_of(self, user: Any) -> str:
        if self.user_type is not None:
            return str(self.user_type(user))
        return underscore(type(user).__name__)

    def role_of(self, user: Any) -> str:
        role = read_attribute(user, self.role_attribute)
        if role is None or not str(role).strip():
            return DEFAULT_ROLE
        return str(getattr(role, "value", role))

    def overrides_of(self, user: Any) -> list[str]:
        """Return the ability identifier strings of the user's override records."""
        records: Iterable[Any] = read_attribute(user, self.overrides_attribute) or []
        names: list[str] = []
        for record in records:
            if isinstance(record, str):
                names.append(record)
            elif isinstance(record, Mapping):
                names.append(record[self.override_field])
            else:
                names.append(getattr(record, self.override_field))
        return names

    # ── lifecycle helpers ────────────────────────────────────

    def replace(self, **changes: Any) -> AccessConfig:
        """Return a copy with *changes* applied."""
        return dataclasses.replace(self, **changes)
