"""PermissionCheck — evaluate one ability requirement for a user."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from access_rules.abilities import AbilityId, parse_qualified_name
from access_rules.exceptions import ConfigurationError, ViolationError
from access_rules.resolver import AbilityResolver

if TYPE_CHECKING:
    from access_rules.config import AccessConfig

logger = logging.getLogger(__name__)

# {namespace: name}, (namespace, name), AbilityId or "namespace/name"
Requirement = Mapping[str, str] | tuple[str, str] | AbilityId | str


def requirement_pair(requirement: Requirement) -> tuple[str, str]:
    """Normalize a single requirement into ``(namespace, name)``."""
    if isinstance(requirement, AbilityId):
        return requirement.namespace, requirement.name
    if isinstance(requirement, str):
        return parse_qualified_name(requirement)
    if isinstance(requirement, Mapping):
        if len(requirement) != 1:
            raise ConfigurationError(
                f"A permission check takes exactly one namespace/name pair (got {dict(requirement)})"
            )
        namespace, name = next(iter(requirement.items()))
        return str(namespace), str(name)
    namespace, name = requirement
    return str(namespace), str(name)


def _about_user(user: Any) -> str:
    if user is None:
        return "Unauthenticated user"
    user_id = getattr(user, "id", None)
    if user_id is None:
        return type(user).__name__
    return f"{type(user).__name__} with ID {user_id}"


class PermissionCheck:
    """Checks whether a user (or no user) holds a single ability.

    Two shapes are offered:

    * :meth:`allowed` answers ``True``/``False`` and never raises for an
      ordinary denial.
    * :meth:`require` raises :class:`ViolationError` instead of returning
      ``False``.

    Errors from the resolver (unknown user type, role or namespace) are
    never turned into a denial; they propagate.
    """

    def __init__(self, user: Any, namespace: str, name: str, config: AccessConfig) -> None:
        self.user = user
        self.ability = AbilityId(str(namespace), str(name))
        self._resolver = AbilityResolver(user, config) if user is not None else None

    @classmethod
    def build(cls, user: Any, requirement: Requirement, config: AccessConfig) -> PermissionCheck:
        namespace, name = requirement_pair(requirement)
        return cls(user, namespace, name, config)

    @classmethod
    def allowed(cls, user: Any, requirement: Requirement, config: AccessConfig) -> bool:
        return cls.build(user, requirement, config).possible()

    @classmethod
    def require(cls, user: Any, requirement: Requirement, config: AccessConfig) -> bool:
        return cls.build(user, requirement, config).possible_or_fail()

    # ── evaluation ───────────────────────────────────────────

    def possible(self) -> bool:
        if self._resolver is None:
            logger.info(self._message(False))
            return False
        can = self._resolver.has(self.ability.namespace, self.ability.name)
        logger.info(self._message(can))
        return can

    def possible_or_fail(self) -> bool:
        if not self.possible():
            raise ViolationError(self._message(False))
        return True

    def _message(self, can: bool) -> str:
        verb = "can" if can else "cannot"
        return f"{_about_user(self.user)} {verb} do '{self.ability}'"
