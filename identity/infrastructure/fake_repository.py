"""File-backed fake implementation of IRepository.

Keeps every entity in memory and rewrites one JSON snapshot after each
successful mutation, so a dry run can be inspected on disk and picked up
again by the next process. Primary entities use their natural key as id:
users are keyed by email, groups and vaults by name, items by
"<VAULT ID>/<TITLE>". Relationships are keyed by their composite id.

A single reader/writer lock guards all maps. Mutations hold the write side
for the whole call, including the file write.
"""

from __future__ import annotations

import dataclasses
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from identity.domain.entities import (
    Group,
    Item,
    Membership,
    User,
    Vault,
    VaultGroupAccess,
    VaultUserAccess,
)
from identity.infrastructure.observability import (
    DefaultFakeRepositoryProbe,
    FakeRepositoryProbe,
)
from identity.ports.exceptions import (
    AlreadyExistsError,
    NotFoundError,
    PersistenceError,
)
from identity.ports.repositories import IRepository
from infrastructure.locking import ReadWriteLock
from shared_kernel.composite_id import pack_id


class StorageSnapshot(BaseModel):
    """On-disk layout of the fake store."""

    model_config = ConfigDict(populate_by_name=True)

    users: dict[str, User] = Field(default_factory=dict, alias="Users")
    groups: dict[str, Group] = Field(default_factory=dict, alias="Groups")
    members: dict[str, Membership] = Field(default_factory=dict, alias="Members")
    vaults: dict[str, Vault] = Field(default_factory=dict, alias="Vaults")
    vault_group_access: dict[str, VaultGroupAccess] = Field(
        default_factory=dict, alias="VaultGroupAccess"
    )
    vault_user_access: dict[str, VaultUserAccess] = Field(
        default_factory=dict, alias="VaultUserAccess"
    )
    items: dict[str, Item] = Field(default_factory=dict, alias="Items")

    def entity_counts(self) -> dict[str, int]:
        return {name: len(entities) for name, entities in self}


class FakeRepository(IRepository):
    """In-memory repository persisted to a JSON file."""

    def __init__(
        self,
        path: str | Path,
        probe: FakeRepositoryProbe | None = None,
    ) -> None:
        """Initialize the store, loading any snapshot already at path.

        A missing or unreadable snapshot is not an error: the store starts
        empty and the first mutation overwrites the file.

        Args:
            path: JSON file the snapshot is read from and written to
            probe: Optional domain probe for observability
        """
        self._path = Path(path)
        self._probe = probe or DefaultFakeRepositoryProbe()
        self._lock = ReadWriteLock()
        self._data = self._load()

    @property
    def path(self) -> Path:
        return self._path

    # Users

    def create_user(self, user: User) -> User:
        with self._lock.write():
            if user.email in self._data.users or self._find_user(user.email):
                self._probe.duplicate_entity("user", user.email)
                raise AlreadyExistsError(
                    f"user with email {user.email!r} already exists"
                )

            created = dataclasses.replace(user, id=user.email)
            self._data.users[created.id] = created
            self._persist()
            self._probe.entity_created("user", created.id)
            return created

    def get_user_by_id(self, user_id: str) -> User:
        with self._lock.read():
            user = self._data.users.get(user_id)
            if user is None:
                self._probe.entity_not_found("user", user_id)
                raise NotFoundError(f"user {user_id!r} does not exist")
            return user

    def get_user_by_email(self, email: str) -> User:
        with self._lock.read():
            user = self._find_user(email)
            if user is None:
                self._probe.entity_not_found("user", email)
                raise NotFoundError(f"user with email {email!r} does not exist")
            return user

    def ensure_user(self, user: User) -> User:
        with self._lock.write():
            self._require("user", self._data.users, user.id)
            self._data.users[user.id] = user
            self._persist()
            self._probe.entity_ensured("user", user.id)
            return user

    def delete_user(self, user_id: str) -> None:
        with self._lock.write():
            self._require("user", self._data.users, user_id)
            del self._data.users[user_id]
            self._persist()
            self._probe.entity_deleted("user", user_id)

    def _find_user(self, email: str) -> User | None:
        return next((u for u in self._data.users.values() if u.email == email), None)

    # Groups

    def create_group(self, group: Group) -> Group:
        with self._lock.write():
            if group.name in self._data.groups or self._find_group(group.name):
                self._probe.duplicate_entity("group", group.name)
                raise AlreadyExistsError(
                    f"group with name {group.name!r} already exists"
                )

            created = dataclasses.replace(group, id=group.name)
            self._data.groups[created.id] = created
            self._persist()
            self._probe.entity_created("group", created.id)
            return created

    def get_group_by_id(self, group_id: str) -> Group:
        with self._lock.read():
            group = self._data.groups.get(group_id)
            if group is None:
                self._probe.entity_not_found("group", group_id)
                raise NotFoundError(f"group {group_id!r} does not exist")
            return group

    def get_group_by_name(self, name: str) -> Group:
        with self._lock.read():
            group = self._find_group(name)
            if group is None:
                self._probe.entity_not_found("group", name)
                raise NotFoundError(f"group with name {name!r} does not exist")
            return group

    def ensure_group(self, group: Group) -> Group:
        with self._lock.write():
            self._require("group", self._data.groups, group.id)
            taken = self._find_group(group.name)
            if taken is not None and taken.id != group.id:
                self._probe.duplicate_entity("group", group.name)
                raise AlreadyExistsError(
                    f"group with name {group.name!r} already exists"
                )

            self._data.groups[group.id] = group
            self._persist()
            self._probe.entity_ensured("group", group.id)
            return group

    def delete_group(self, group_id: str) -> None:
        with self._lock.write():
            self._require("group", self._data.groups, group_id)
            del self._data.groups[group_id]
            self._persist()
            self._probe.entity_deleted("group", group_id)

    def _find_group(self, name: str) -> Group | None:
        return next((g for g in self._data.groups.values() if g.name == name), None)

    # Vaults

    def create_vault(self, vault: Vault) -> Vault:
        with self._lock.write():
            if vault.name in self._data.vaults or self._find_vault(vault.name):
                self._probe.duplicate_entity("vault", vault.name)
                raise AlreadyExistsError(
                    f"vault with name {vault.name!r} already exists"
                )

            created = dataclasses.replace(vault, id=vault.name)
            self._data.vaults[created.id] = created
            self._persist()
            self._probe.entity_created("vault", created.id)
            return created

    def get_vault_by_id(self, vault_id: str) -> Vault:
        with self._lock.read():
            vault = self._data.vaults.get(vault_id)
            if vault is None:
                self._probe.entity_not_found("vault", vault_id)
                raise NotFoundError(f"vault {vault_id!r} does not exist")
            return vault

    def get_vault_by_name(self, name: str) -> Vault:
        with self._lock.read():
            vault = self._find_vault(name)
            if vault is None:
                self._probe.entity_not_found("vault", name)
                raise NotFoundError(f"vault with name {name!r} does not exist")
            return vault

    def list_vaults_by_user(self, user_id: str) -> list[Vault]:
        with self._lock.read():
            group_ids = {
                m.group_id for m in self._data.members.values() if m.user_id == user_id
            }
            vault_ids = {
                a.vault_id
                for a in self._data.vault_user_access.values()
                if a.user_id == user_id
            }
            vault_ids.update(
                a.vault_id
                for a in self._data.vault_group_access.values()
                if a.group_id in group_ids
            )

            vaults = [
                self._data.vaults[v] for v in vault_ids if v in self._data.vaults
            ]
            return sorted(vaults, key=lambda v: v.name)

    def ensure_vault(self, vault: Vault) -> Vault:
        with self._lock.write():
            self._require("vault", self._data.vaults, vault.id)
            taken = self._find_vault(vault.name)
            if taken is not None and taken.id != vault.id:
                self._probe.duplicate_entity("vault", vault.name)
                raise AlreadyExistsError(
                    f"vault with name {vault.name!r} already exists"
                )

            self._data.vaults[vault.id] = vault
            self._persist()
            self._probe.entity_ensured("vault", vault.id)
            return vault

    def delete_vault(self, vault_id: str) -> None:
        with self._lock.write():
            self._require("vault", self._data.vaults, vault_id)
            del self._data.vaults[vault_id]
            self._persist()
            self._probe.entity_deleted("vault", vault_id)

    def _find_vault(self, name: str) -> Vault | None:
        return next((v for v in self._data.vaults.values() if v.name == name), None)

    # Items

    def create_item(self, item: Item) -> Item:
        key = pack_id(item.vault_id, item.title)
        with self._lock.write():
            if key in self._data.items or self._find_item(item.vault_id, item.title):
                self._probe.duplicate_entity("item", key)
                raise AlreadyExistsError(
                    f"item with title {item.title!r} already exists"
                    f" in vault {item.vault_id!r}"
                )

            created = dataclasses.replace(item, id=key)
            self._data.items[created.id] = created
            self._persist()
            self._probe.entity_created("item", created.id)
            return created

    def get_item_by_id(self, item_id: str) -> Item:
        with self._lock.read():
            item = self._data.items.get(item_id)
            if item is None:
                self._probe.entity_not_found("item", item_id)
                raise NotFoundError(f"item {item_id!r} does not exist")
            return item

    def get_item_by_title(self, vault_id: str, title: str) -> Item:
        with self._lock.read():
            item = self._find_item(vault_id, title)
            if item is None:
                self._probe.entity_not_found("item", pack_id(vault_id, title))
                raise NotFoundError(
                    f"item with title {title!r} in vault {vault_id!r} does not exist"
                )
            return item

    def ensure_item(self, item: Item) -> Item:
        with self._lock.write():
            self._require("item", self._data.items, item.id)
            taken = self._find_item(item.vault_id, item.title)
            if taken is not None and taken.id != item.id:
                self._probe.duplicate_entity("item", pack_id(item.vault_id, item.title))
                raise AlreadyExistsError(
                    f"item with title {item.title!r} already exists"
                    f" in vault {item.vault_id!r}"
                )

            # The category is fixed at creation.
            current = self._data.items[item.id]
            self._data.items[item.id] = dataclasses.replace(
                item, category=current.category
            )
            self._persist()
            self._probe.entity_ensured("item", item.id)
            return item

    def delete_item(self, item_id: str) -> None:
        with self._lock.write():
            self._require("item", self._data.items, item_id)
            del self._data.items[item_id]
            self._persist()
            self._probe.entity_deleted("item", item_id)

    def _find_item(self, vault_id: str, title: str) -> Item | None:
        return next(
            (
                i
                for i in self._data.items.values()
                if i.vault_id == vault_id and i.title == title
            ),
            None,
        )

    # Memberships

    def ensure_membership(self, membership: Membership) -> Membership:
        with self._lock.write():
            self._data.members[membership.id] = membership
            self._persist()
            self._probe.entity_ensured("membership", membership.id)
            return membership

    def get_membership_by_id(self, group_id: str, user_id: str) -> Membership:
        key = pack_id(group_id, user_id)
        with self._lock.read():
            membership = self._data.members.get(key)
            if membership is None:
                self._probe.entity_not_found("membership", key)
                raise NotFoundError(
                    f"member {user_id!r} in group {group_id!r} not found"
                )
            return membership

    def delete_membership(self, group_id: str, user_id: str) -> None:
        key = pack_id(group_id, user_id)
        with self._lock.write():
            self._require("membership", self._data.members, key)
            del self._data.members[key]
            self._persist()
            self._probe.entity_deleted("membership", key)

    # Vault group access

    def ensure_vault_group_access(
        self, access: VaultGroupAccess
    ) -> VaultGroupAccess:
        with self._lock.write():
            self._data.vault_group_access[access.id] = access
            self._persist()
            self._probe.entity_ensured("vault_group_access", access.id)
            return access

    def get_vault_group_access_by_id(
        self, vault_id: str, group_id: str
    ) -> VaultGroupAccess:
        key = pack_id(vault_id, group_id)
        with self._lock.read():
            access = self._data.vault_group_access.get(key)
            if access is None:
                self._probe.entity_not_found("vault_group_access", key)
                raise NotFoundError(
                    f"group access {group_id!r} in vault {vault_id!r} not found"
                )
            return access

    def delete_vault_group_access(self, vault_id: str, group_id: str) -> None:
        key = pack_id(vault_id, group_id)
        with self._lock.write():
            self._require("vault_group_access", self._data.vault_group_access, key)
            del self._data.vault_group_access[key]
            self._persist()
            self._probe.entity_deleted("vault_group_access", key)

    # Vault user access

    def ensure_vault_user_access(
        self, access: VaultUserAccess
    ) -> VaultUserAccess:
        with self._lock.write():
            self._data.vault_user_access[access.id] = access
            self._persist()
            self._probe.entity_ensured("vault_user_access", access.id)
            return access

    def get_vault_user_access_by_id(
        self, vault_id: str, user_id: str
    ) -> VaultUserAccess:
        key = pack_id(vault_id, user_id)
        with self._lock.read():
            access = self._data.vault_user_access.get(key)
            if access is None:
                self._probe.entity_not_found("vault_user_access", key)
                raise NotFoundError(
                    f"user access {user_id!r} in vault {vault_id!r} not found"
                )
            return access

    def delete_vault_user_access(self, vault_id: str, user_id: str) -> None:
        key = pack_id(vault_id, user_id)
        with self._lock.write():
            self._require("vault_user_access", self._data.vault_user_access, key)
            del self._data.vault_user_access[key]
            self._persist()
            self._probe.entity_deleted("vault_user_access", key)

    # Storage

    def _require(self, entity: str, entities: dict, key: str) -> None:
        """Raise NotFoundError unless key is present. Caller holds the lock."""
        if key not in entities:
            self._probe.entity_not_found(entity, key)
            raise NotFoundError(f"{entity} {key!r} does not exist")

    def _load(self) -> StorageSnapshot:
        path = str(self._path)
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            self._probe.storage_load_skipped(path, "file does not exist")
            return StorageSnapshot()
        except OSError as e:
            self._probe.storage_load_skipped(path, f"could not read file: {e}")
            return StorageSnapshot()

        try:
            snapshot = StorageSnapshot.model_validate_json(raw)
        except ValidationError as e:
            self._probe.storage_load_skipped(path, f"could not parse file: {e}")
            return StorageSnapshot()

        self._probe.storage_loaded(path, snapshot.entity_counts())
        return snapshot

    def _persist(self) -> None:
        """Overwrite the snapshot file. Caller holds the write lock."""
        path = str(self._path)
        try:
            self._path.write_text(
                self._data.model_dump_json(by_alias=True, indent=2),
                encoding="utf-8",
            )
        except OSError as e:
            self._probe.storage_persist_failed(path, str(e))
            raise PersistenceError(f"could not write file: {e}") from e

        self._probe.storage_persisted(path)
