"""AbilityResolver — effective abilities of one user."""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Any

from access_rules.abilities import AbilityId, parse_qualified_name
from access_rules.exceptions import (
    UnknownNamespaceError,
    UnknownRoleError,
    UnknownUserTypeError,
)

if TYPE_CHECKING:
    from access_rules.config import AccessConfig

logger = logging.getLogger(__name__)


class AbilityResolver:
    """Computes the grants of *user* from the role table and their overrides.

    Resolution happens once, when the resolver is created:

    1. The base grants for ``(user type, role)`` are deep-copied out of
       ``config.roles_and_permissions``.  A blank role resolves against
       ``"primary"``.
    2. Every override record naming an ability that exists in the copy sets
       it to ``True``.  Overrides naming anything else are skipped, so the
       grant table stays the schema of what can be granted.

    Nothing is cached between resolvers; build a new one per query.

    Raises:
        UnknownUserTypeError: The user type has no entry in the table.
        UnknownRoleError:     The role has no entry for the user type.
        MalformedAbilityIdentifierError: An override record is not
                              ``namespace/name``.
    """

    def __init__(self, user: Any, config: AccessConfig) -> None:
        self._user = user
        self._config = config
        self.user_type = config.user_type_of(user)
        self.role = config.role_of(user)
        self._grants = self._resolve()

    # ── resolution ───────────────────────────────────────────

    def _role_assigned(self) -> dict[str, dict[str, bool]]:
        table = self._config.roles_and_permissions
        if self.user_type not in table:
            raise UnknownUserTypeError(self.user_type)
        roles = table[self.user_type]
        if self.role not in roles:
            raise UnknownRoleError(self.user_type, self.role)
        return roles[self.role]

    def _resolve(self) -> dict[str, dict[str, bool]]:
        grants = copy.deepcopy(self._role_assigned())
        for ability_name in self._config.overrides_of(self._user):
            namespace, name = parse_qualified_name(ability_name)
            # only abilities the role table already knows about can be granted
            if name not in grants.get(namespace, {}):
                logger.debug(
                    "Ignoring override '%s' for %s/%s: not in role grants",
                    ability_name,
                    self.user_type,
                    self.role,
                )
                continue
            grants[namespace][name] = True
        return grants

    # ── queries ──────────────────────────────────────────────

    def has(self, namespace: str, name: str) -> bool:
        """Return whether the ability is granted.

        An unknown namespace raises :class:`UnknownNamespaceError`; an unknown
        name inside a known namespace is simply not granted.
        """
        abilities = self._grants.get(str(namespace))
        if abilities is None:
            raise UnknownNamespaceError(str(namespace))
        return bool(abilities.get(str(name), False))

    def granted_abilities(self) -> list[AbilityId]:
        """Return every granted ability, sorted by namespace then name."""
        return sorted(
            AbilityId(namespace, name)
            for namespace, abilities in self._grants.items()
            for name, granted in abilities.items()
            if granted
        )

    @property
    def grants(self) -> dict[str, dict[str, bool]]:
        """A copy of the resolved grant table."""
        return copy.deepcopy(self._grants)
