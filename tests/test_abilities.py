"""Tests for ability identifiers."""

import pytest

from access_rules import (
    AbilityId,
    ConfigurationError,
    MalformedAbilityIdentifierError,
    parse_qualified_name,
    qualified_name,
)


def test_qualified_name():
    assert qualified_name("namespace", "ability") == "namespace/ability"


@pytest.mark.parametrize(("namespace", "name"), [("", "ability"), ("namespace", ""), (" ", "x")])
def test_qualified_name_rejects_blank_parts(namespace, name):
    with pytest.raises(MalformedAbilityIdentifierError):
        qualified_name(namespace, name)


def test_parse_qualified_name():
    assert parse_qualified_name("namespace/ability") == ("namespace", "ability")


@pytest.mark.parametrize("value", ["invalid", "too/many/parts", "/ability", "namespace/", ""])
def test_parse_qualified_name_rejects_malformed(value):
    with pytest.raises(MalformedAbilityIdentifierError) as exc_info:
        parse_qualified_name(value)
    assert exc_info.value.value == value


def test_malformed_identifier_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        AbilityId.parse("nope")


def test_ability_id_round_trip():
    ability = AbilityId.parse("docs/read")
    assert ability == AbilityId("docs", "read")
    assert str(ability) == "docs/read"


def test_ability_id_rejects_blank_parts():
    with pytest.raises(MalformedAbilityIdentifierError):
        AbilityId("docs", "")


def test_ability_ids_sort_by_namespace_then_name():
    ids = [AbilityId("b", "a"), AbilityId("a", "z"), AbilityId("a", "b")]
    assert sorted(ids) == [AbilityId("a", "b"), AbilityId("a", "z"), AbilityId("b", "a")]
