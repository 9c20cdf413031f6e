"""Tests for rule context adapters."""

import pytest

from access_rules import MethodPredicates, PredicateMap, RuleContext, UnimplementedRuleError
from access_rules.context import as_rule_context

from .conftest import User


class Controller:
    def __init__(self):
        self.calls = []

    def allow_no_args(self):
        self.calls.append(())
        return True

    def allow_with_user(self, user):
        self.calls.append((user,))
        return user is not None

    def allow_with_info(self, user, rule_info):
        self.calls.append((user, rule_info))
        return rule_info["action"] == "edit"


# ── method predicates ────────────────────────────────────────


def test_method_predicate_arity_dispatch():
    controller = Controller()
    ctx = MethodPredicates(controller)
    user = User()

    assert ctx.evaluate_rule("no_args", user, "show")
    assert ctx.evaluate_rule("with_user", user, "show")
    assert ctx.evaluate_rule("with_info", user, "edit")
    assert not ctx.evaluate_rule("with_info", user, "show")

    assert controller.calls[0] == ()
    assert controller.calls[1] == (user,)
    assert controller.calls[2] == (user, {"rule": "with_info", "action": "edit"})


def test_method_predicate_missing_raises():
    with pytest.raises(UnimplementedRuleError) as exc_info:
        MethodPredicates(Controller()).evaluate_rule("basic_security", None, "show")
    assert exc_info.value.token == "basic_security"
    assert "allow_basic_security" in str(exc_info.value)


def test_method_predicate_result_is_coerced_to_bool():
    class Loose:
        def allow_thing(self, user):
            return "yes"

    assert MethodPredicates(Loose()).evaluate_rule("thing", None, None) is True


# ── predicate map ────────────────────────────────────────────


def test_predicate_map():
    ctx = PredicateMap({"owner": lambda user: user.id == 1, "open": lambda: False})
    assert ctx.evaluate_rule("owner", User(id=1), "show")
    assert not ctx.evaluate_rule("owner", User(id=9), "show")
    assert not ctx.evaluate_rule("open", None, "show")


def test_predicate_map_missing_raises():
    with pytest.raises(UnimplementedRuleError):
        PredicateMap({}).evaluate_rule("owner", None, None)


# ── adaptation ───────────────────────────────────────────────


def test_as_rule_context():
    assert isinstance(as_rule_context({"a": lambda: True}), PredicateMap)
    assert isinstance(as_rule_context(Controller()), MethodPredicates)

    ctx = PredicateMap({})
    assert as_rule_context(ctx) is ctx
    assert isinstance(ctx, RuleContext)


def test_no_context_raises_for_custom_tokens():
    with pytest.raises(UnimplementedRuleError):
        as_rule_context(None).evaluate_rule("owner", None, None)
