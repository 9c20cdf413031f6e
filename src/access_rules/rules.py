"""Rule value types: rule sets, permission requirements, allow/required rules."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum, StrEnum
from typing import Any

from access_rules.abilities import AbilityId
from access_rules.exceptions import ConfigurationError

PUBLIC = "public"
AUTHENTICATED_USER = "authenticated_user"
ALL_ACTIONS = "all"

Handler = Callable[[], Any]

# A clause is a single token or a tuple of tokens that must all pass.
Clause = str | tuple[str, ...]


class ViolationKind(StrEnum):
    SEVERE = "severe"
    HIDDEN = "hidden"
    REDIRECT = "redirect"
    NOT_PERMITTED = "not_permitted"

    @classmethod
    def coerce(cls, value: ViolationKind | str) -> ViolationKind:
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(k.value for k in cls)
            raise ConfigurationError(
                f"You must provide a valid violation type (got '{value}', expected one of: {valid})"
            ) from None


@dataclass(frozen=True)
class Violation:
    """Describes a denial: which kind, and an optional zero-arg handler.

    A violation is falsy, so ``if manager.allow_action(...)`` reads as a
    plain admit/deny test while the descriptor stays available on denial.
    """

    kind: ViolationKind
    handler: Handler | None = None

    def __bool__(self) -> bool:
        return False

    def resolve_handler(self) -> Any:
        """Invoke the handler, or return ``None`` when there is none."""
        return self.handler() if self.handler is not None else None


def as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, str | bytes) or not isinstance(value, Iterable):
        return [value]
    return list(value)


def _token(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if not isinstance(value, str):
        raise ConfigurationError(f"Rule tokens must be strings (got {value!r})")
    token = value.strip()
    if not token:
        raise ConfigurationError("Rule tokens cannot be blank")
    return token


# ── rule sets ────────────────────────────────────────────────


@dataclass(frozen=True)
class RuleSet:
    """``all`` or ``any`` over clauses; a tuple clause is a nested AND."""

    combinator: str
    clauses: tuple[Clause, ...]

    def __post_init__(self) -> None:
        if self.combinator not in ("all", "any"):
            raise ConfigurationError(f"Unknown rule set combinator: '{self.combinator}'")
        if not self.clauses:
            raise ConfigurationError("A rule set needs at least one rule")

    @classmethod
    def build(cls, rules: Any) -> RuleSet:
        """Normalize *rules* into a rule set.

        * ``RuleSet`` is returned as is.
        * ``{"all": [...]}`` / ``{"any": [...]}`` keep their combinator.
        * A bare token or a list of tokens becomes ``{"all": [...]}``.
        """
        if isinstance(rules, RuleSet):
            return rules
        if isinstance(rules, Mapping):
            keys = set(rules) & {"all", "any"}
            if len(keys) != 1 or len(rules) != 1:
                raise ConfigurationError(
                    f"A rule set mapping needs exactly one of 'all' or 'any' (got {sorted(rules)})"
                )
            combinator = keys.pop()
            return cls(combinator, cls._clauses(rules[combinator]))
        return cls("all", cls._clauses(rules))

    @staticmethod
    def _clauses(value: Any) -> tuple[Clause, ...]:
        clauses: list[Clause] = []
        for clause in as_list(value):
            if isinstance(clause, str | Enum) or not isinstance(clause, Iterable):
                clauses.append(_token(clause))
                continue
            if isinstance(clause, Mapping):
                raise ConfigurationError(
                    f"Rule sets cannot be nested inside a clause (got {dict(clause)!r})"
                )
            group = tuple(_token(t) for t in clause)
            if not group:
                raise ConfigurationError("Rule groups cannot be empty")
            clauses.append(group)
        return tuple(clauses)

    def tokens(self) -> list[str]:
        """Every token in the set, nested groups flattened."""
        found: list[str] = []
        for clause in self.clauses:
            found.extend((clause,) if isinstance(clause, str) else clause)
        return found

    def export(self) -> dict[str, Any]:
        return {
            self.combinator: [c if isinstance(c, str) else list(c) for c in self.clauses]
        }


# ── permission requirements ──────────────────────────────────


def parse_permissions(config: Any) -> tuple[AbilityId, ...]:
    """Expand ``{namespace: name | [names]}`` into ordered ability pairs.

    A list of such mappings is accepted too.  Every resulting pair is
    required (AND).
    """
    if not config:
        return ()
    mappings = [config] if isinstance(config, Mapping) else as_list(config)
    pairs: list[AbilityId] = []
    for mapping in mappings:
        if isinstance(mapping, AbilityId):
            pairs.append(mapping)
            continue
        if isinstance(mapping, str):
            pairs.append(AbilityId.parse(mapping))
            continue
        if not isinstance(mapping, Mapping):
            raise ConfigurationError(f"Invalid permission requirement: {mapping!r}")
        for namespace, names in mapping.items():
            if names is None:
                raise ConfigurationError(f"Permission namespace '{namespace}' has no ability name")
            for name in as_list(names):
                pairs.append(AbilityId(_token(namespace), _token(name)))
    return tuple(pairs)


# ── rules ────────────────────────────────────────────────────


@dataclass
class AllowRule:
    """Grants access when it passes, for its actions and/or aliases."""

    rule_set: RuleSet
    actions: tuple[str, ...] = ()
    aliases: tuple[str, ...] = ()
    perms: tuple[AbilityId, ...] = ()

    @classmethod
    def build(
        cls,
        rules: Any,
        actions: Any = None,
        perms: Any = None,
        aliases: Any = None,
    ) -> AllowRule:
        action_names = tuple(_token(a) for a in as_list(actions))
        alias_names = tuple(_token(a) for a in as_list(aliases))
        if not action_names and not alias_names:
            raise ConfigurationError(
                "You must specify the actions which the rule applies to or give the rule a name"
            )
        return cls(
            rule_set=RuleSet.build(rules),
            actions=action_names,
            # actions double as names when no alias is given
            aliases=alias_names or action_names,
            perms=parse_permissions(perms),
        )

    def applies_to(self, action: str) -> bool:
        return ALL_ACTIONS in self.actions or str(action) in self.actions

    def export(self) -> dict[str, Any]:
        return {
            "rules": self.rule_set.export(),
            "actions": list(self.actions),
            "aliases": list(self.aliases),
            "perms": [str(p) for p in self.perms],
        }


@dataclass
class RequiredRule:
    """Must pass before any allow rule is considered."""

    rule_set: RuleSet
    violation: ViolationKind = ViolationKind.SEVERE
    perms: tuple[AbilityId, ...] = ()
    handler: Handler | None = field(default=None, compare=False)

    @classmethod
    def build(
        cls,
        rules: Any,
        violation: ViolationKind | str = ViolationKind.SEVERE,
        perms: Any = None,
        handler: Handler | None = None,
    ) -> RequiredRule:
        return cls(
            rule_set=RuleSet.build(rules),
            violation=ViolationKind.coerce(violation),
            perms=parse_permissions(perms),
            handler=handler,
        )

    def __deepcopy__(self, memo: dict[int, Any]) -> RequiredRule:
        # handlers may be bound methods; they are shared, never copied
        return RequiredRule(self.rule_set, self.violation, self.perms, self.handler)

    def to_violation(self) -> Violation:
        return Violation(self.violation, self.handler)

    def export(self) -> dict[str, Any]:
        return {
            "rules": self.rule_set.export(),
            "violation": self.violation.value,
            "perms": [str(p) for p in self.perms],
            "has_handler": self.handler is not None,
        }
