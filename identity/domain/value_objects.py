"""Value objects for the identity domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for roles and access permissions.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import StrEnum
from typing import Iterable


class MembershipRole(StrEnum):
    """Roles a user can hold inside a group.

    MEMBER is the role the organization grants by default when a user
    is added to a group.
    """

    MEMBER = "member"
    MANAGER = "manager"


@dataclass(frozen=True)
class AccessPermissions:
    """Fine-grained permissions of a vault access grant.

    Every field is one capability; its name is also the token used on the
    wire. Field declaration order is the order tokens are serialized in.
    """

    allow_viewing: bool = False
    allow_editing: bool = False
    allow_managing: bool = False
    view_items: bool = False
    create_items: bool = False
    edit_items: bool = False
    archive_items: bool = False
    delete_items: bool = False
    view_and_copy_passwords: bool = False
    view_item_history: bool = False
    import_items: bool = False
    export_items: bool = False
    copy_and_share_items: bool = False
    print_items: bool = False
    manage_vault: bool = False

    def to_tokens(self) -> list[str]:
        """Return the tokens of the granted capabilities in declaration order."""
        return [token for token in PERMISSION_TOKENS if getattr(self, token)]

    @classmethod
    def from_tokens(cls, tokens: Iterable[str]) -> AccessPermissions:
        """Build permissions from wire tokens.

        Unknown tokens are ignored so newer capabilities reported by the
        organization backend do not break reads.
        """
        known = frozenset(PERMISSION_TOKENS)
        return cls(**{token: True for token in tokens if token in known})


PERMISSION_TOKENS: tuple[str, ...] = tuple(f.name for f in fields(AccessPermissions))


@dataclass(frozen=True)
class ItemSection:
    """A named group of fields inside a vault item."""

    label: str
    id: str = ""


@dataclass(frozen=True)
class ItemField:
    """A single field of a vault item.

    Fields without a section sit at the top level of the item. The type is
    the backend's field type (e.g. "STRING", "CONCEALED") and the purpose
    marks the built-in username and password fields.
    """

    label: str
    value: str = ""
    type: str = "STRING"
    purpose: str = ""
    id: str = ""
    section: ItemSection | None = None
