"""
access_rules — Hello World

Required rules gate every action, first failure wins. Allow rules then
admit the action when any one of them passes. Abilities come from a role
grant table with per-user overrides on top.
"""

import logging
from dataclasses import dataclass, field

from access_rules import AccessConfig, AccessControlled, AccessDeniedError, AccessManager

# ─── Your user model (anything exposing a role and override records) ───


@dataclass
class Permission:
    ability_name: str


@dataclass
class User:
    id: int
    role: str | None = None
    permissions: list[Permission] = field(default_factory=list)


CONFIG = AccessConfig(
    roles_and_permissions={
        "user": {
            "admin": {"docs": {"read": True, "write": True}},
            "staff": {"docs": {"read": True, "write": False}},
            "primary": {"docs": {"read": False, "write": False}},
        }
    }
)


class ApplicationController(AccessControlled):
    access_config = CONFIG

    def __init__(self, user: User | None, maintenance: bool = False) -> None:
        self.current_user = user
        self.maintenance = maintenance

    def allow_not_in_maintenance(self, user: User | None) -> bool:
        return not self.maintenance


ApplicationController.access_require("not_in_maintenance", violation="not_permitted")
ApplicationController.access_allow("public", actions="index")


class DocumentsController(ApplicationController):
    def allow_author(self, user: User | None, rule_info: dict) -> bool:
        return user is not None and user.id == 7


DocumentsController.access_allow("authenticated_user", actions="show", perms={"docs": "read"})
DocumentsController.access_allow(
    {"any": ["author", ["authenticated_user"]]},
    actions=["edit", "update"],
    perms={"docs": "write"},
    aliases="can_edit",
)
DocumentsController.access_no_match("redirect", handler=lambda: "/documents")


def attempt(controller: AccessControlled, action: str) -> None:
    try:
        controller.authorize(action)
        print(f"  {action:<8} allowed")
    except AccessDeniedError as e:
        target = e.violation.resolve_handler()
        suffix = f" -> {target}" if target else ""
        print(f"  {action:<8} denied ({e.violation.kind.value}){suffix}")


def main() -> None:
    logging.basicConfig(level=logging.WARNING)

    staff = User(id=3, role="staff")
    promoted = User(id=4, role="staff", permissions=[Permission("docs/write")])

    print("=== Staff member ===\n")
    for action in ("index", "show", "edit", "destroy"):
        attempt(DocumentsController(staff), action)

    print("\n=== Staff member with a docs/write override ===\n")
    attempt(DocumentsController(promoted), "edit")
    print(f"  can_edit: {DocumentsController(promoted).access_allowed('can_edit')}")

    print("\n=== Maintenance mode ===\n")
    attempt(DocumentsController(staff, maintenance=True), "index")

    print("\n=== Plain manager, no classes ===\n")
    manager = AccessManager(CONFIG)
    manager.add_allow_rule("public", aliases="can_browse")
    print(f"  anonymous can_browse: {manager.allow('can_browse', None, None)}")

    print("\nRules JSON:", DocumentsController.access_manager().export())


if __name__ == "__main__":
    main()
