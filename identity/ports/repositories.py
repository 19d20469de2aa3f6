"""Repository protocols (ports) for the identity bounded context.

Repository protocols define the interface every storage backend implements.
Two backends exist: a file-backed fake store and an adapter over the op CLI.
They must behave the same for the same inputs.

"Ensure" on users, groups and vaults is update-only: the entity must have
been created first. On memberships and vault grants, which have no creation
step of their own, "ensure" creates or updates.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from identity.domain.entities import (
    Group,
    Item,
    Membership,
    User,
    Vault,
    VaultGroupAccess,
    VaultUserAccess,
)


@runtime_checkable
class IUserRepository(Protocol):
    """Repository for organization users."""

    def create_user(self, user: User) -> User:
        """Create a user keyed by email.

        Args:
            user: The user to create; its id is ignored

        Returns:
            The created user with its backend-assigned id

        Raises:
            AlreadyExistsError: If a user with the same email exists
        """
        ...

    def get_user_by_id(self, user_id: str) -> User:
        """Retrieve a user by id.

        Raises:
            NotFoundError: If no user has that id
        """
        ...

    def get_user_by_email(self, email: str) -> User:
        """Retrieve a user by email.

        Raises:
            NotFoundError: If no user has that email
        """
        ...

    def ensure_user(self, user: User) -> User:
        """Overwrite the mutable fields of an existing user.

        Returns:
            The user as supplied

        Raises:
            NotFoundError: If no user has that id
        """
        ...

    def delete_user(self, user_id: str) -> None:
        """Delete a user.

        Raises:
            NotFoundError: If no user has that id
        """
        ...


@runtime_checkable
class IGroupRepository(Protocol):
    """Repository for organization groups."""

    def create_group(self, group: Group) -> Group:
        """Create a group keyed by name.

        Raises:
            AlreadyExistsError: If a group with the same name exists
        """
        ...

    def get_group_by_id(self, group_id: str) -> Group:
        """Retrieve a group by id."""
        ...

    def get_group_by_name(self, name: str) -> Group:
        """Retrieve a group by name."""
        ...

    def ensure_group(self, group: Group) -> Group:
        """Overwrite the mutable fields of an existing group."""
        ...

    def delete_group(self, group_id: str) -> None:
        """Delete a group."""
        ...


@runtime_checkable
class IVaultRepository(Protocol):
    """Repository for organization vaults."""

    def create_vault(self, vault: Vault) -> Vault:
        """Create a vault keyed by name.

        Raises:
            AlreadyExistsError: If a vault with the same name exists
        """
        ...

    def get_vault_by_id(self, vault_id: str) -> Vault:
        """Retrieve a vault by id."""
        ...

    def get_vault_by_name(self, name: str) -> Vault:
        """Retrieve a vault by name."""
        ...

    def list_vaults_by_user(self, user_id: str) -> list[Vault]:
        """List the vaults a user can access, directly or through a group."""
        ...

    def ensure_vault(self, vault: Vault) -> Vault:
        """Overwrite the mutable fields of an existing vault."""
        ...

    def delete_vault(self, vault_id: str) -> None:
        """Delete a vault."""
        ...


@runtime_checkable
class IItemRepository(Protocol):
    """Repository for vault items (secrets)."""

    def create_item(self, item: Item) -> Item:
        """Create an item in its vault.

        Raises:
            AlreadyExistsError: If the vault already holds an item with the
                same title
        """
        ...

    def get_item_by_id(self, item_id: str) -> Item:
        """Retrieve an item by id."""
        ...

    def get_item_by_title(self, vault_id: str, title: str) -> Item:
        """Retrieve an item by title, scoped to one vault."""
        ...

    def ensure_item(self, item: Item) -> Item:
        """Overwrite the title, url, tags and fields of an existing item.

        The category of an item cannot change after creation.
        """
        ...

    def delete_item(self, item_id: str) -> None:
        """Delete an item."""
        ...


@runtime_checkable
class IMembershipRepository(Protocol):
    """Repository for group memberships, keyed by (group_id, user_id)."""

    def ensure_membership(self, membership: Membership) -> Membership:
        """Add a user to a group, or change the role of an existing member."""
        ...

    def get_membership_by_id(self, group_id: str, user_id: str) -> Membership:
        """Retrieve a membership.

        Raises:
            NotFoundError: If the user is not a member of the group
        """
        ...

    def delete_membership(self, group_id: str, user_id: str) -> None:
        """Remove a user from a group."""
        ...


@runtime_checkable
class IVaultGroupAccessRepository(Protocol):
    """Repository for group grants on vaults, keyed by (vault_id, group_id)."""

    def ensure_vault_group_access(self, access: VaultGroupAccess) -> VaultGroupAccess:
        """Set the exact permissions a group holds on a vault.

        The resulting permissions replace any previous grant; they are
        never merged with it.
        """
        ...

    def get_vault_group_access_by_id(
        self, vault_id: str, group_id: str
    ) -> VaultGroupAccess:
        """Retrieve a group grant.

        Raises:
            NotFoundError: If the group holds no grant on the vault
        """
        ...

    def delete_vault_group_access(self, vault_id: str, group_id: str) -> None:
        """Revoke a group grant."""
        ...


@runtime_checkable
class IVaultUserAccessRepository(Protocol):
    """Repository for user grants on vaults, keyed by (vault_id, user_id)."""

    def ensure_vault_user_access(self, access: VaultUserAccess) -> VaultUserAccess:
        """Set the exact permissions a user holds on a vault."""
        ...

    def get_vault_user_access_by_id(
        self, vault_id: str, user_id: str
    ) -> VaultUserAccess:
        """Retrieve a user grant.

        Raises:
            NotFoundError: If the user holds no grant on the vault
        """
        ...

    def delete_vault_user_access(self, vault_id: str, user_id: str) -> None:
        """Revoke a user grant."""
        ...


@runtime_checkable
class IRepository(
    IUserRepository,
    IGroupRepository,
    IVaultRepository,
    IItemRepository,
    IMembershipRepository,
    IVaultGroupAccessRepository,
    IVaultUserAccessRepository,
    Protocol,
):
    """The complete storage contract consumed by the reconciliation layer."""

    pass
