"""Argument vector builder for the op CLI.

Commands are assembled one token at a time through chained calls, e.g.::

    OpCommand().vault_arg().group_arg().grant_arg().vault_flag(vault_id)

Value flags that receive an empty string are left out so the tool applies
its own defaults. The builder only serializes; it does not validate.
"""

from __future__ import annotations

from typing import Sequence


class OpCommand:
    """Append-only builder for an op CLI argument vector."""

    def __init__(self) -> None:
        self._args: list[str] = []

    @property
    def args(self) -> list[str]:
        """A copy of the arguments accumulated so far."""
        return list(self._args)

    def _append(self, *tokens: str) -> OpCommand:
        self._args.extend(tokens)
        return self

    def _flag(self, flag: str, value: str) -> OpCommand:
        if value == "":
            return self
        return self._append(flag, value)

    # Verbs and nouns

    def create_arg(self) -> OpCommand:
        return self._append("create")

    def edit_arg(self) -> OpCommand:
        return self._append("edit")

    def get_arg(self) -> OpCommand:
        return self._append("get")

    def list_arg(self) -> OpCommand:
        return self._append("list")

    def provision_arg(self) -> OpCommand:
        return self._append("provision")

    def delete_arg(self) -> OpCommand:
        return self._append("delete")

    def grant_arg(self) -> OpCommand:
        return self._append("grant")

    def revoke_arg(self) -> OpCommand:
        return self._append("revoke")

    def user_arg(self) -> OpCommand:
        return self._append("user")

    def group_arg(self) -> OpCommand:
        return self._append("group")

    def vault_arg(self) -> OpCommand:
        return self._append("vault")

    def item_arg(self) -> OpCommand:
        return self._append("item")

    def raw_arg(self, value: str) -> OpCommand:
        """Append a positional value (an id, a name or an email) verbatim."""
        return self._append(value)

    # Flags

    def name_flag(self, name: str) -> OpCommand:
        return self._flag("--name", name)

    def description_flag(self, description: str) -> OpCommand:
        return self._flag("--description", description)

    def role_flag(self, role: str) -> OpCommand:
        return self._flag("--role", role)

    def email_flag(self, email: str) -> OpCommand:
        return self._flag("--email", email)

    def group_flag(self, group_id: str) -> OpCommand:
        return self._flag("--group", group_id)

    def user_flag(self, user_id: str) -> OpCommand:
        return self._flag("--user", user_id)

    def vault_flag(self, vault_id: str) -> OpCommand:
        return self._flag("--vault", vault_id)

    def title_flag(self, title: str) -> OpCommand:
        return self._flag("--title", title)

    def url_flag(self, url: str) -> OpCommand:
        return self._flag("--url", url)

    def category_flag(self, category: str) -> OpCommand:
        return self._flag("--category", category)

    def tags_flag(self, tags: Sequence[str]) -> OpCommand:
        if not tags:
            return self
        return self._append("--tags", ",".join(tags))

    def format_json_flag(self) -> OpCommand:
        return self._append("--format", "json")

    def no_input_flag(self) -> OpCommand:
        return self._append("--no-input")

    def permissions_flag(self, permissions: Sequence[str]) -> OpCommand:
        """Append permissions as one comma-joined token, keeping their order.

        Omitted entirely when there are no permissions.
        """
        if not permissions:
            return self
        return self._append("--permissions", ",".join(permissions))

    def field_assignment_arg(
        self, label: str, field_type: str, value: str, section: str = ""
    ) -> OpCommand:
        """Append an item field assignment.

        Renders `label[type]=value`, or `section.label[type]=value` when the
        field belongs to a section.
        """
        path = f"{section}.{label}" if section else label
        return self._append(f"{path}[{field_type}]={value}")
