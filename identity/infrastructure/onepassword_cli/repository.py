"""op CLI implementation of IRepository.

Every repository call maps to one op invocation, with two exceptions that
the CLI offers no single primitive for:

- Membership roles: `op group user grant` always grants the default role
  on the first call, so any other role needs the same command a second
  time. If the second call fails the user stays a plain member.
- Vault grants: permissions cannot be patched, so the previous grant is
  revoked (ignoring failures, there may be none) and the full permission
  set is granted again. Between both calls the subject has no access.

Ensure calls do not read the entity back; they return what they were given.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from pydantic import ValidationError

from identity.domain.entities import (
    Group,
    Item,
    Membership,
    User,
    Vault,
    VaultGroupAccess,
    VaultUserAccess,
)
from identity.domain.value_objects import AccessPermissions, MembershipRole
from identity.infrastructure.observability import (
    DefaultOpCliRepositoryProbe,
    OpCliRepositoryProbe,
)
from identity.infrastructure.onepassword_cli.command import OpCommand
from identity.infrastructure.onepassword_cli.dtos import (
    OP_GROUP_MEMBER_LIST,
    OP_VAULT_ACCESS_LIST,
    OP_VAULT_LIST,
    OpGroup,
    OpItem,
    OpUser,
    OpVault,
    OpVaultAccess,
    map_op_to_group,
    map_op_to_item,
    map_op_to_role,
    map_op_to_user,
    map_op_to_vault,
)
from identity.infrastructure.onepassword_cli.runner import OpCliRunner
from identity.ports.exceptions import (
    AlreadyExistsError,
    CommandFailedError,
    InvalidCommandOutputError,
    NotFoundError,
)
from identity.ports.repositories import IRepository

T = TypeVar("T")


class OpCliRepository(IRepository):
    """Repository that drives the op CLI as a subprocess.

    Holds no state and takes no locks; consistency between concurrent
    callers is whatever the organization backend provides.
    """

    def __init__(
        self,
        cli: OpCliRunner,
        probe: OpCliRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with an op runner.

        Args:
            cli: Runner used for every op invocation
            probe: Optional domain probe for observability
        """
        self._cli = cli
        self._probe = probe or DefaultOpCliRepositoryProbe()

    # Users

    def create_user(self, user: User) -> User:
        if self._exists(lambda: self.get_user_by_email(user.email)):
            raise AlreadyExistsError(
                f"user with email {user.email!r} already exists"
            )

        cmd = (
            OpCommand()
            .user_arg()
            .provision_arg()
            .email_flag(user.email)
            .name_flag(user.name)
            .format_json_flag()
        )
        stdout = self._run(cmd)
        return map_op_to_user(self._decode(stdout, OpUser.model_validate_json))

    def get_user_by_id(self, user_id: str) -> User:
        return self._get_user(user_id)

    def get_user_by_email(self, email: str) -> User:
        return self._get_user(email)

    def _get_user(self, ref: str) -> User:
        cmd = OpCommand().user_arg().get_arg().raw_arg(ref).format_json_flag()
        stdout = self._run(cmd)
        return map_op_to_user(self._decode(stdout, OpUser.model_validate_json))

    def ensure_user(self, user: User) -> User:
        cmd = OpCommand().user_arg().edit_arg().raw_arg(user.id).name_flag(user.name)
        self._run(cmd)
        return user

    def delete_user(self, user_id: str) -> None:
        self._run(OpCommand().user_arg().delete_arg().raw_arg(user_id))

    # Groups

    def create_group(self, group: Group) -> Group:
        # op allows several groups with the same name.
        if self._exists(lambda: self.get_group_by_name(group.name)):
            raise AlreadyExistsError(
                f"group with name {group.name!r} already exists"
            )

        cmd = (
            OpCommand()
            .group_arg()
            .create_arg()
            .raw_arg(group.name)
            .description_flag(group.description)
            .format_json_flag()
        )
        stdout = self._run(cmd)
        return map_op_to_group(self._decode(stdout, OpGroup.model_validate_json))

    def get_group_by_id(self, group_id: str) -> Group:
        return self._get_group(group_id)

    def get_group_by_name(self, name: str) -> Group:
        return self._get_group(name)

    def _get_group(self, ref: str) -> Group:
        cmd = OpCommand().group_arg().get_arg().raw_arg(ref).format_json_flag()
        stdout = self._run(cmd)
        return map_op_to_group(self._decode(stdout, OpGroup.model_validate_json))

    def ensure_group(self, group: Group) -> Group:
        cmd = (
            OpCommand()
            .group_arg()
            .edit_arg()
            .raw_arg(group.id)
            .name_flag(group.name)
            .description_flag(group.description)
        )
        self._run(cmd)
        return group

    def delete_group(self, group_id: str) -> None:
        self._run(OpCommand().group_arg().delete_arg().raw_arg(group_id))

    # Vaults

    def create_vault(self, vault: Vault) -> Vault:
        # op allows several vaults with the same name.
        if self._exists(lambda: self.get_vault_by_name(vault.name)):
            raise AlreadyExistsError(
                f"vault with name {vault.name!r} already exists"
            )

        cmd = (
            OpCommand()
            .vault_arg()
            .create_arg()
            .raw_arg(vault.name)
            .description_flag(vault.description)
            .format_json_flag()
        )
        stdout = self._run(cmd)
        return map_op_to_vault(self._decode(stdout, OpVault.model_validate_json))

    def get_vault_by_id(self, vault_id: str) -> Vault:
        return self._get_vault(vault_id)

    def get_vault_by_name(self, name: str) -> Vault:
        return self._get_vault(name)

    def _get_vault(self, ref: str) -> Vault:
        cmd = OpCommand().vault_arg().get_arg().raw_arg(ref).format_json_flag()
        stdout = self._run(cmd)
        return map_op_to_vault(self._decode(stdout, OpVault.model_validate_json))

    def list_vaults_by_user(self, user_id: str) -> list[Vault]:
        cmd = (
            OpCommand().vault_arg().list_arg().user_flag(user_id).format_json_flag()
        )
        stdout = self._run(cmd)
        vaults = self._decode(stdout, OP_VAULT_LIST.validate_json)
        return [map_op_to_vault(v) for v in vaults]

    def ensure_vault(self, vault: Vault) -> Vault:
        cmd = (
            OpCommand()
            .vault_arg()
            .edit_arg()
            .raw_arg(vault.id)
            .name_flag(vault.name)
            .description_flag(vault.description)
        )
        self._run(cmd)
        return vault

    def delete_vault(self, vault_id: str) -> None:
        self._run(OpCommand().vault_arg().delete_arg().raw_arg(vault_id))

    # Items

    def create_item(self, item: Item) -> Item:
        # op allows several items with the same title in one vault.
        if self._exists(lambda: self.get_item_by_title(item.vault_id, item.title)):
            raise AlreadyExistsError(
                f"item with title {item.title!r} already exists"
                f" in vault {item.vault_id!r}"
            )

        cmd = (
            OpCommand()
            .item_arg()
            .create_arg()
            .title_flag(item.title)
            .url_flag(item.url)
            .category_flag(item.category)
            .vault_flag(item.vault_id)
            .tags_flag(item.tags)
        )
        self._assign_fields(cmd, item).format_json_flag()
        stdout = self._run(cmd)
        return map_op_to_item(self._decode(stdout, OpItem.model_validate_json))

    def get_item_by_id(self, item_id: str) -> Item:
        cmd = OpCommand().item_arg().get_arg().raw_arg(item_id).format_json_flag()
        stdout = self._run(cmd)
        return map_op_to_item(self._decode(stdout, OpItem.model_validate_json))

    def get_item_by_title(self, vault_id: str, title: str) -> Item:
        cmd = (
            OpCommand()
            .item_arg()
            .get_arg()
            .raw_arg(title)
            .format_json_flag()
            .vault_flag(vault_id)
        )
        stdout = self._run(cmd)
        return map_op_to_item(self._decode(stdout, OpItem.model_validate_json))

    def ensure_item(self, item: Item) -> Item:
        cmd = (
            OpCommand()
            .item_arg()
            .edit_arg()
            .raw_arg(item.id)
            .title_flag(item.title)
            .url_flag(item.url)
            .vault_flag(item.vault_id)
            .tags_flag(item.tags)
        )
        self._assign_fields(cmd, item).format_json_flag()
        self._run(cmd)
        return item

    def delete_item(self, item_id: str) -> None:
        self._run(OpCommand().item_arg().delete_arg().raw_arg(item_id))

    # Memberships

    def ensure_membership(self, membership: Membership) -> Membership:
        role = MembershipRole(membership.role)
        cmd = (
            OpCommand()
            .group_arg()
            .user_arg()
            .grant_arg()
            .group_flag(membership.group_id)
            .user_flag(membership.user_id)
            .role_flag(role.value)
        )
        self._run(cmd)

        # The first grant always lands as the default role.
        if role != MembershipRole.MEMBER:
            self._probe.membership_role_fixup(
                membership.group_id, membership.user_id, role.value
            )
            self._run(cmd)

        return membership

    def get_membership_by_id(self, group_id: str, user_id: str) -> Membership:
        cmd = (
            OpCommand()
            .group_arg()
            .user_arg()
            .list_arg()
            .raw_arg(group_id)
            .format_json_flag()
        )
        stdout = self._run(cmd)
        members = self._decode(stdout, OP_GROUP_MEMBER_LIST.validate_json)

        member = next((m for m in members if m.id == user_id), None)
        if member is None:
            raise NotFoundError(f"member {user_id!r} in group {group_id!r} not found")

        try:
            role = map_op_to_role(member.role)
        except ValueError as e:
            raise InvalidCommandOutputError(str(e)) from e

        return Membership(group_id=group_id, user_id=user_id, role=role)

    def delete_membership(self, group_id: str, user_id: str) -> None:
        cmd = (
            OpCommand()
            .group_arg()
            .user_arg()
            .revoke_arg()
            .group_flag(group_id)
            .user_flag(user_id)
        )
        self._run(cmd)

    # Vault group access

    def ensure_vault_group_access(
        self, access: VaultGroupAccess
    ) -> VaultGroupAccess:
        try:
            self.delete_vault_group_access(access.vault_id, access.group_id)
        except CommandFailedError as e:
            self._probe.stale_grant_revoke_ignored(
                access.vault_id, access.group_id, str(e)
            )

        cmd = (
            OpCommand()
            .vault_arg()
            .group_arg()
            .grant_arg()
            .vault_flag(access.vault_id)
            .group_flag(access.group_id)
            .no_input_flag()
            .permissions_flag(access.permissions.to_tokens())
        )
        self._run(cmd)
        return access

    def get_vault_group_access_by_id(
        self, vault_id: str, group_id: str
    ) -> VaultGroupAccess:
        scope = OpCommand().vault_arg().group_arg()
        access = self._find_vault_access(scope, vault_id, group_id)
        if access is None:
            raise NotFoundError(
                f"group access {group_id!r} in vault {vault_id!r} not found"
            )

        return VaultGroupAccess(
            vault_id=vault_id,
            group_id=group_id,
            permissions=AccessPermissions.from_tokens(access.permissions),
        )

    def delete_vault_group_access(self, vault_id: str, group_id: str) -> None:
        cmd = (
            OpCommand()
            .vault_arg()
            .group_arg()
            .revoke_arg()
            .vault_flag(vault_id)
            .group_flag(group_id)
        )
        self._run(cmd)

    # Vault user access

    def ensure_vault_user_access(
        self, access: VaultUserAccess
    ) -> VaultUserAccess:
        try:
            self.delete_vault_user_access(access.vault_id, access.user_id)
        except CommandFailedError as e:
            self._probe.stale_grant_revoke_ignored(
                access.vault_id, access.user_id, str(e)
            )

        cmd = (
            OpCommand()
            .vault_arg()
            .user_arg()
            .grant_arg()
            .vault_flag(access.vault_id)
            .user_flag(access.user_id)
            .no_input_flag()
            .permissions_flag(access.permissions.to_tokens())
        )
        self._run(cmd)
        return access

    def get_vault_user_access_by_id(
        self, vault_id: str, user_id: str
    ) -> VaultUserAccess:
        scope = OpCommand().vault_arg().user_arg()
        access = self._find_vault_access(scope, vault_id, user_id)
        if access is None:
            raise NotFoundError(
                f"user access {user_id!r} in vault {vault_id!r} not found"
            )

        return VaultUserAccess(
            vault_id=vault_id,
            user_id=user_id,
            permissions=AccessPermissions.from_tokens(access.permissions),
        )

    def delete_vault_user_access(self, vault_id: str, user_id: str) -> None:
        cmd = (
            OpCommand()
            .vault_arg()
            .user_arg()
            .revoke_arg()
            .vault_flag(vault_id)
            .user_flag(user_id)
        )
        self._run(cmd)

    # Helpers

    def _find_vault_access(
        self, scope: OpCommand, vault_id: str, subject_id: str
    ) -> OpVaultAccess | None:
        """List every grant on a vault and pick the subject's one."""
        cmd = scope.list_arg().raw_arg(vault_id).format_json_flag()
        stdout = self._run(cmd)
        accesses = self._decode(stdout, OP_VAULT_ACCESS_LIST.validate_json)
        return next((a for a in accesses if a.id == subject_id), None)

    @staticmethod
    def _assign_fields(cmd: OpCommand, item: Item) -> OpCommand:
        """Append one assignment per field, in item order."""
        for f in item.fields:
            section = f.section.label if f.section else ""
            cmd.field_assignment_arg(f.label, f.type, f.value, section)
        return cmd

    def _exists(self, lookup: Callable[[], object]) -> bool:
        """Whether a natural-key lookup succeeds; any failure means absent."""
        try:
            lookup()
        except (CommandFailedError, InvalidCommandOutputError):
            return False
        return True

    def _run(self, cmd: OpCommand) -> str:
        """Run a command and return its stdout.

        Raises:
            CommandFailedError: If op cannot be started or exits non-zero
        """
        args = cmd.args
        try:
            result = self._cli.run(args)
        except OSError as e:
            self._probe.command_failed(args, str(e))
            raise CommandFailedError(f"op cli command failed: {e}: ") from e

        if not result.ok:
            error = f"exit status {result.returncode}"
            self._probe.command_failed(args, f"{error}: {result.stderr}")
            raise CommandFailedError(
                f"op cli command failed: {error}: {result.stderr}",
                stderr=result.stderr,
            )

        self._probe.command_executed(args)
        return result.stdout

    @staticmethod
    def _decode(stdout: str, parse: Callable[[str], T]) -> T:
        try:
            return parse(stdout)
        except ValidationError as e:
            raise InvalidCommandOutputError(
                f"could not unmarshal op cli stdout: {e}"
            ) from e
