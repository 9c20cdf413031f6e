"""AbilityId — a namespaced capability name."""

from __future__ import annotations

from dataclasses import dataclass

from access_rules.exceptions import MalformedAbilityIdentifierError

SEPARATOR = "/"


def qualified_name(namespace: str, name: str) -> str:
    """Return ``"namespace/name"``.  Blank parts are rejected."""
    if not str(namespace or "").strip() or not str(name or "").strip():
        raise MalformedAbilityIdentifierError(
            f"{namespace}{SEPARATOR}{name}", "Ability namespaces and names cannot be blank"
        )
    return f"{namespace}{SEPARATOR}{name}"


def parse_qualified_name(value: str) -> tuple[str, str]:
    """Split ``"namespace/name"`` into its two parts."""
    parts = str(value).split(SEPARATOR)
    if len(parts) != 2:
        raise MalformedAbilityIdentifierError(value)
    if any(not part.strip() for part in parts):
        raise MalformedAbilityIdentifierError(
            value, f"Ability namespaces or names cannot be blank (was '{value}')"
        )
    return parts[0], parts[1]


@dataclass(frozen=True, order=True)
class AbilityId:
    """Immutable ``(namespace, name)`` pair.

    Ordering is namespace first, then name, so sorted collections of
    identifiers are deterministic.
    """

    namespace: str
    name: str

    def __post_init__(self) -> None:
        # validates both parts
        qualified_name(self.namespace, self.name)

    @classmethod
    def parse(cls, value: str) -> AbilityId:
        namespace, name = parse_qualified_name(value)
        return cls(namespace, name)

    def __str__(self) -> str:
        return qualified_name(self.namespace, self.name)
