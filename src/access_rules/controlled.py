"""AccessControlled — class-scoped access rules, inherited by subclasses."""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Literal

from access_rules.config import AccessConfig, read_attribute
from access_rules.context import MethodPredicates
from access_rules.exceptions import AccessDeniedError
from access_rules.manager import AccessManager
from access_rules.rules import Handler, Violation, ViolationKind

logger = logging.getLogger(__name__)


class AccessControlled:
    """Base class for host handlers/controllers that declare access rules.

    Rules are declared on the class and each subclass starts from a clone
    of its parent's rules, so adding a rule to a subclass never changes the
    parent::

        class DocumentsController(AccessControlled):
            access_config = config

        DocumentsController.access_require("basic_security", violation="not_permitted")
        DocumentsController.access_allow("authenticated_user", actions=["show"])

    Custom rule tokens resolve to ``allow_<token>`` methods on the instance.
    The current user is read from ``access_config.current_user_attribute``.
    """

    access_config: ClassVar[AccessConfig | None] = None
    _access_manager: ClassVar[AccessManager | None] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # snapshot of the parent's rules at definition time
        inherited = super(cls, cls)._access_manager
        cls._access_manager = inherited.clone() if inherited is not None else None

    # ── declaration ──────────────────────────────────────────

    @classmethod
    def access_manager(cls) -> AccessManager:
        manager = cls.__dict__.get("_access_manager")
        if manager is None:
            manager = AccessManager()
            cls._access_manager = manager
        return manager

    @classmethod
    def access_allow(
        cls,
        rules: Any,
        *,
        perms: Any = None,
        actions: Any = None,
        aliases: Any = None,
    ) -> None:
        """Allow *actions* (and/or name the rule *aliases*) when *rules* pass."""
        cls.access_manager().add_allow_rule(rules, actions=actions, perms=perms, aliases=aliases)

    @classmethod
    def access_require(
        cls,
        rules: Any,
        *,
        perms: Any = None,
        violation: ViolationKind | str = ViolationKind.SEVERE,
        handler: Handler | None = None,
    ) -> None:
        """Require *rules* to pass before any action is considered."""
        cls.access_manager().add_required_rule(
            rules, violation=violation, perms=perms, handler=handler
        )

    @classmethod
    def access_no_match(cls, violation: ViolationKind | str, handler: Handler | None = None) -> None:
        cls.access_manager().configure_no_match(violation, handler)

    # ── evaluation ───────────────────────────────────────────

    def current_access_user(self) -> Any:
        config = self.access_config or AccessConfig()
        return read_attribute(self, config.current_user_attribute)

    def evaluate_rule(self, token: str, user: Any, action: str | None) -> bool:
        return MethodPredicates(self).evaluate_rule(token, user, action)

    def access_allowed(self, *rule_names: str) -> bool:
        """Return whether any of the named rules passes for the current user."""
        return type(self).access_manager().allow(
            list(rule_names), self.current_access_user(), self, config=self.access_config
        )

    def check_access(self, action: str) -> Literal[True] | Violation:
        return type(self).access_manager().allow_action(
            self.current_access_user(), self, action, config=self.access_config
        )

    def authorize(self, action: str) -> None:
        """Raise :class:`AccessDeniedError` unless *action* is allowed."""
        result = self.check_access(action)
        if result is True:
            return
        user = self.current_access_user()
        who = f"User {getattr(user, 'id', user)}" if user is not None else "An unauthenticated user"
        where = f"{type(self).__name__}#{action}"
        if result.kind is ViolationKind.SEVERE:
            logger.error(
                "%s tried to access %s, which is considered suspicious", who, where
            )
        else:
            logger.info("Blocked access for %s to %s (%s)", who, where, result.kind.value)
        raise AccessDeniedError(result, action=str(action))
