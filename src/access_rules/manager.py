"""AccessManager — the rule registry and evaluator."""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Literal

from access_rules.check import PermissionCheck
from access_rules.context import as_rule_context
from access_rules.exceptions import ConfigurationError
from access_rules.rules import (
    ALL_ACTIONS,
    AUTHENTICATED_USER,
    PUBLIC,
    AllowRule,
    Handler,
    RequiredRule,
    RuleSet,
    Violation,
    ViolationKind,
    as_list,
)

if TYPE_CHECKING:
    from access_rules.abilities import AbilityId
    from access_rules.config import AccessConfig
    from access_rules.context import RuleContext

logger = logging.getLogger(__name__)


class AccessManager:
    """Holds required rules, allow rules and the no-match policy for one scope.

    Evaluation of :meth:`allow_action`:

    * **Required rules** run in registration order.  The first one that
      fails stops the call and its violation is returned.
    * **Allow rules** that apply to the action run next, in registration
      order.  The first one that passes admits the action.
    * If none pass, the **no-match** violation is returned.

    Denials are returned as :class:`Violation` values (which are falsy);
    only configuration and schema problems raise.

    Parameters:
        config: The :class:`AccessConfig` used for permission requirements.
                Can also be supplied per call.
    """

    def __init__(self, config: AccessConfig | None = None) -> None:
        self.config = config
        self._required_rules: list[RequiredRule] = []
        self._action_rules: list[AllowRule] = []
        self._all_actions_rules: list[AllowRule] = []
        self._named_rules: dict[str, list[AllowRule]] = {}
        self._no_match = Violation(ViolationKind.SEVERE)

    # ── registration ─────────────────────────────────────────

    def add_allow_rule(
        self,
        rules: Any,
        actions: Any = None,
        perms: Any = None,
        aliases: Any = None,
    ) -> AllowRule:
        """Register a rule that admits *actions* and/or is reachable by *aliases*."""
        rule = AllowRule.build(rules, actions=actions, perms=perms, aliases=aliases)
        for alias in rule.aliases:
            self._named_rules.setdefault(alias, []).append(rule)
        if rule.actions:
            if ALL_ACTIONS in rule.actions:
                self._all_actions_rules.append(rule)
            self._action_rules.append(rule)
        return rule

    def add_required_rule(
        self,
        rules: Any,
        violation: ViolationKind | str = ViolationKind.SEVERE,
        perms: Any = None,
        handler: Handler | None = None,
    ) -> RequiredRule:
        """Register a rule every action must pass before allow rules are tried."""
        rule = RequiredRule.build(rules, violation=violation, perms=perms, handler=handler)
        self._required_rules.append(rule)
        return rule

    def configure_no_match(
        self,
        violation: ViolationKind | str,
        handler: Handler | None = None,
    ) -> None:
        """Replace the violation used when no allow rule admits an action."""
        self._no_match = Violation(ViolationKind.coerce(violation), handler)

    # ── evaluation ───────────────────────────────────────────

    def allow_action(
        self,
        user: Any,
        context: Any,
        action: str,
        *,
        config: AccessConfig | None = None,
    ) -> Literal[True] | Violation:
        """Decide whether *user* may perform *action*."""
        ctx = as_rule_context(context)
        action = str(action)

        for required in self._required_rules:
            if not self._passes(required.rule_set, required.perms, user, ctx, action, config):
                logger.debug("Required rule %s failed for '%s'", required.rule_set.export(), action)
                return required.to_violation()

        for rule in self._action_rules:
            if not rule.applies_to(action):
                continue
            if self._passes(rule.rule_set, rule.perms, user, ctx, action, config):
                return True

        logger.debug("No allow rule matched '%s'", action)
        return self._no_match

    def allow(
        self,
        rule_names: Any,
        user: Any,
        context: Any,
        *,
        config: AccessConfig | None = None,
    ) -> bool:
        """Return whether any rule registered under *rule_names* passes.

        Actions are not consulted.  Unknown names match nothing.
        """
        ctx = as_rule_context(context)
        for name in as_list(rule_names):
            for rule in self._named_rules.get(str(name), []):
                if self._passes(rule.rule_set, rule.perms, user, ctx, None, config):
                    return True
        return False

    def _passes(
        self,
        rule_set: RuleSet,
        perms: Iterable[AbilityId],
        user: Any,
        ctx: RuleContext,
        action: str | None,
        config: AccessConfig | None,
    ) -> bool:
        if not self._user_has_perms(user, perms, config):
            return False

        def clause_passes(clause: str | tuple[str, ...]) -> bool:
            tokens = (clause,) if isinstance(clause, str) else clause
            return all(self._apply_token(t, user, ctx, action) for t in tokens)

        if rule_set.combinator == "all":
            return all(clause_passes(c) for c in rule_set.clauses)
        return any(clause_passes(c) for c in rule_set.clauses)

    def _user_has_perms(
        self,
        user: Any,
        perms: Iterable[AbilityId],
        config: AccessConfig | None,
    ) -> bool:
        perms = tuple(perms)
        if not perms:
            return True
        active = config or self.config
        if active is None:
            raise ConfigurationError(
                "Rules with permission requirements need an AccessConfig to evaluate"
            )
        return all(PermissionCheck.allowed(user, perm, active) for perm in perms)

    @staticmethod
    def _apply_token(token: str, user: Any, ctx: RuleContext, action: str | None) -> bool:
        if token == PUBLIC:
            return True
        if token == AUTHENTICATED_USER:
            return user is not None
        return bool(ctx.evaluate_rule(token, user, action))

    # ── scope inheritance ────────────────────────────────────

    def clone(self) -> AccessManager:
        """Return an independent copy; adding rules to it never touches ``self``.

        Handlers and the config are shared by reference.
        """
        twin = AccessManager(self.config)
        memo: dict[int, Any] = {}
        twin._required_rules = copy.deepcopy(self._required_rules, memo)
        twin._action_rules = copy.deepcopy(self._action_rules, memo)
        twin._all_actions_rules = copy.deepcopy(self._all_actions_rules, memo)
        twin._named_rules = copy.deepcopy(self._named_rules, memo)
        twin._no_match = self._no_match
        return twin

    # ── introspection ────────────────────────────────────────

    @property
    def no_match_violation(self) -> ViolationKind:
        return self._no_match.kind

    @property
    def no_match(self) -> Violation:
        return self._no_match

    @property
    def required_rules(self) -> list[RequiredRule]:
        return list(self._required_rules)

    @property
    def action_rules(self) -> list[AllowRule]:
        return list(self._action_rules)

    @property
    def all_actions_rules(self) -> list[AllowRule]:
        return list(self._all_actions_rules)

    @property
    def named_rules(self) -> dict[str, list[AllowRule]]:
        return {name: list(rules) for name, rules in self._named_rules.items()}

    def named_rule_exists(self, name: str) -> bool:
        return str(name) in self._named_rules

    def required_rule_exists(self, token: str) -> bool:
        """Return whether *token* appears in any required rule."""
        return any(str(token) in r.rule_set.tokens() for r in self._required_rules)

    def export(self) -> dict[str, Any]:
        """Return a JSON-serializable snapshot of the registered rules."""
        return {
            "required": [r.export() for r in self._required_rules],
            "allow": [r.export() for r in self._unique_allow_rules()],
            "no_match": {
                "violation": self._no_match.kind.value,
                "has_handler": self._no_match.handler is not None,
            },
        }

    def _unique_allow_rules(self) -> list[AllowRule]:
        seen: dict[int, AllowRule] = {}
        for rule in self._action_rules:
            seen.setdefault(id(rule), rule)
        for rules in self._named_rules.values():
            for rule in rules:
                seen.setdefault(id(rule), rule)
        return list(seen.values())
