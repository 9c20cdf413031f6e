"""Rule contexts — how custom rule tokens get resolved to predicates."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from typing import Any, Protocol, runtime_checkable

from access_rules.exceptions import UnimplementedRuleError

PREDICATE_PREFIX = "allow_"


@runtime_checkable
class RuleContext(Protocol):
    """Anything that can answer a custom rule token for a user and action."""

    def evaluate_rule(self, token: str, user: Any, action: str | None) -> bool: ...


def _positional_arity(fn: Callable[..., Any]) -> int:
    """Number of positional parameters *fn* accepts (``-1`` for ``*args``)."""
    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return 1
    count = 0
    for p in params:
        if p.kind is inspect.Parameter.VAR_POSITIONAL:
            return -1
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            count += 1
    return count


def call_predicate(
    fn: Callable[..., Any], token: str, user: Any, action: str | None
) -> bool:
    """Call *fn* with ``()``, ``(user)`` or ``(user, rule_info)`` by its arity."""
    arity = _positional_arity(fn)
    if arity == 0:
        return bool(fn())
    if arity == 1:
        return bool(fn(user))
    return bool(fn(user, {"rule": token, "action": action}))


class PredicateMap:
    """Resolves tokens from a ``{token: predicate}`` mapping."""

    def __init__(self, predicates: Mapping[str, Callable[..., Any]]) -> None:
        self._predicates = dict(predicates)

    def evaluate_rule(self, token: str, user: Any, action: str | None) -> bool:
        fn = self._predicates.get(token)
        if fn is None:
            raise UnimplementedRuleError(token, "no predicate registered")
        return call_predicate(fn, token, user, action)


class MethodPredicates:
    """Resolves ``token`` to an ``allow_<token>`` method on *target*."""

    def __init__(self, target: Any) -> None:
        self._target = target

    def evaluate_rule(self, token: str, user: Any, action: str | None) -> bool:
        method_name = f"{PREDICATE_PREFIX}{token}"
        fn = getattr(self._target, method_name, None)
        if not callable(fn):
            raise UnimplementedRuleError(
                token, f"{type(self._target).__name__}.{method_name} not implemented"
            )
        return call_predicate(fn, token, user, action)


class _NoContext:
    def evaluate_rule(self, token: str, user: Any, action: str | None) -> bool:
        raise UnimplementedRuleError(token, "no rule context supplied")


def as_rule_context(context: Any) -> RuleContext:
    """Adapt whatever the host passed as context into a :class:`RuleContext`."""
    if context is None:
        return _NoContext()
    if isinstance(context, RuleContext):
        return context
    if isinstance(context, Mapping):
        return PredicateMap(context)
    return MethodPredicates(context)
