"""Domain model for the identity bounded context."""

from identity.domain.entities import (
    Group,
    Item,
    Membership,
    User,
    Vault,
    VaultGroupAccess,
    VaultUserAccess,
)
from identity.domain.value_objects import (
    PERMISSION_TOKENS,
    AccessPermissions,
    ItemField,
    ItemSection,
    MembershipRole,
)

__all__ = [
    "AccessPermissions",
    "Group",
    "Item",
    "ItemField",
    "ItemSection",
    "Membership",
    "MembershipRole",
    "PERMISSION_TOKENS",
    "User",
    "Vault",
    "VaultGroupAccess",
    "VaultUserAccess",
]
