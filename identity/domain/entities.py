"""Entities of the identity domain.

Users, groups, vaults and vault items carry an identifier assigned by the
backend at creation. Memberships and vault grants are identified by the pair of keys
they relate; their composite identifier is derived, never stored.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from identity.domain.value_objects import (
    AccessPermissions,
    ItemField,
    ItemSection,
    MembershipRole,
)
from shared_kernel.composite_id import pack_id, unpack_id, verify_id

MEMBERSHIP_ID_SHAPE = "<GROUP ID>/<USER ID>"
VAULT_GROUP_ACCESS_ID_SHAPE = "<VAULT ID>/<GROUP ID>"
VAULT_USER_ACCESS_ID_SHAPE = "<VAULT ID>/<USER ID>"


@dataclass(frozen=True)
class User:
    """A person in the organization.

    The email is the natural key used for creation and is unique among users.
    """

    email: str
    name: str = ""
    id: str = ""


@dataclass(frozen=True)
class Group:
    """A named group of users. Names are unique among groups."""

    name: str
    description: str = ""
    id: str = ""


@dataclass(frozen=True)
class Vault:
    """A named vault. Names are unique among vaults."""

    name: str
    description: str = ""
    id: str = ""


@dataclass(frozen=True)
class Item:
    """A secret stored in a vault.

    The title is the natural key within a vault. Category is lowercase
    ("login", "password", "database", ...).
    """

    vault_id: str
    title: str
    category: str = "login"
    url: str = ""
    tags: tuple[str, ...] = ()
    fields: tuple[ItemField, ...] = ()
    sections: tuple[ItemSection, ...] = ()
    id: str = ""

    def field_by_label(self, label: str) -> ItemField | None:
        """Return the first top-level field with the given label."""
        return next(
            (f for f in self.fields if f.section is None and f.label == label),
            None,
        )


@dataclass(frozen=True)
class Membership:
    """A user's membership in a group with a specific role."""

    group_id: str
    user_id: str
    role: MembershipRole = MembershipRole.MEMBER

    @property
    def id(self) -> str:
        """Composite identifier: <GROUP ID>/<USER ID>."""
        return pack_id(self.group_id, self.user_id)

    @staticmethod
    def keys_from_id(value: str) -> tuple[str, str]:
        """Split a membership identifier into (group_id, user_id)."""
        return unpack_id(value, MEMBERSHIP_ID_SHAPE)

    def verify_id(self, value: str) -> None:
        """Check that an explicit identifier matches this membership's keys."""
        verify_id(
            value, self.group_id, self.user_id, "group", "user", MEMBERSHIP_ID_SHAPE
        )


@dataclass(frozen=True)
class VaultGroupAccess:
    """Permissions a group holds on a vault."""

    vault_id: str
    group_id: str
    permissions: AccessPermissions = field(default_factory=AccessPermissions)

    @property
    def id(self) -> str:
        """Composite identifier: <VAULT ID>/<GROUP ID>."""
        return pack_id(self.vault_id, self.group_id)

    @staticmethod
    def keys_from_id(value: str) -> tuple[str, str]:
        """Split a grant identifier into (vault_id, group_id)."""
        return unpack_id(value, VAULT_GROUP_ACCESS_ID_SHAPE)

    def verify_id(self, value: str) -> None:
        """Check that an explicit identifier matches this grant's keys."""
        verify_id(
            value,
            self.vault_id,
            self.group_id,
            "vault",
            "group",
            VAULT_GROUP_ACCESS_ID_SHAPE,
        )


@dataclass(frozen=True)
class VaultUserAccess:
    """Permissions a single user holds on a vault."""

    vault_id: str
    user_id: str
    permissions: AccessPermissions = field(default_factory=AccessPermissions)

    @property
    def id(self) -> str:
        """Composite identifier: <VAULT ID>/<USER ID>."""
        return pack_id(self.vault_id, self.user_id)

    @staticmethod
    def keys_from_id(value: str) -> tuple[str, str]:
        """Split a grant identifier into (vault_id, user_id)."""
        return unpack_id(value, VAULT_USER_ACCESS_ID_SHAPE)

    def verify_id(self, value: str) -> None:
        """Check that an explicit identifier matches this grant's keys."""
        verify_id(
            value,
            self.vault_id,
            self.user_id,
            "vault",
            "user",
            VAULT_USER_ACCESS_ID_SHAPE,
        )
