"""Wire models for op CLI JSON output.

These mirror what op prints with `--format json`; they are not domain
objects. Fields op prints that we do not use are ignored. Mapping to the
domain happens in exactly one function per entity.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from identity.domain.entities import Group, Item, User, Vault
from identity.domain.value_objects import ItemField, ItemSection, MembershipRole


class OpModel(BaseModel):
    """Base for op wire models."""

    model_config = ConfigDict(extra="ignore")


class OpUser(OpModel):
    id: str
    email: str = ""
    name: str = ""


class OpGroup(OpModel):
    id: str
    name: str = ""
    description: str = ""


class OpVault(OpModel):
    id: str
    name: str = ""
    description: str = ""


class OpGroupMember(OpModel):
    """An entry of `op group user list`."""

    id: str
    role: str = ""


class OpVaultAccess(OpModel):
    """An entry of `op vault group list` or `op vault user list`."""

    id: str
    permissions: list[str] = Field(default_factory=list)


class OpItemSection(OpModel):
    id: str = ""
    label: str = ""


class OpItemField(OpModel):
    id: str = ""
    type: str = ""
    purpose: str = ""
    label: str = ""
    value: str = ""
    section: OpItemSection | None = None


class OpItemUrl(OpModel):
    href: str = ""
    primary: bool = False


class OpItem(OpModel):
    """Output of `op item get` and `op item create`."""

    id: str
    title: str = ""
    category: str = ""
    vault: OpVault
    urls: list[OpItemUrl] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    item_fields: list[OpItemField] = Field(default_factory=list, alias="fields")
    sections: list[OpItemSection] = Field(default_factory=list)


OP_VAULT_LIST = TypeAdapter(list[OpVault])
OP_GROUP_MEMBER_LIST = TypeAdapter(list[OpGroupMember])
OP_VAULT_ACCESS_LIST = TypeAdapter(list[OpVaultAccess])


def map_op_to_user(u: OpUser) -> User:
    return User(id=u.id, email=u.email, name=u.name)


def map_op_to_group(g: OpGroup) -> Group:
    return Group(id=g.id, name=g.name, description=g.description)


def map_op_to_vault(v: OpVault) -> Vault:
    return Vault(id=v.id, name=v.name, description=v.description)


def _map_op_to_section(s: OpItemSection) -> ItemSection:
    return ItemSection(id=s.id, label=s.label)


def map_op_to_item(i: OpItem) -> Item:
    """Map an op item to the domain.

    The primary url wins; without one the first url is used. Category is
    lowercased since op prints it in capitals.
    """
    primary = next((u for u in i.urls if u.primary), None)
    if primary is None and i.urls:
        primary = i.urls[0]

    return Item(
        id=i.id,
        vault_id=i.vault.id,
        title=i.title,
        category=i.category.lower(),
        url=primary.href if primary else "",
        tags=tuple(i.tags),
        fields=tuple(
            ItemField(
                id=f.id,
                label=f.label,
                value=f.value,
                type=f.type,
                purpose=f.purpose,
                section=_map_op_to_section(f.section) if f.section else None,
            )
            for f in i.item_fields
        ),
        sections=tuple(_map_op_to_section(s) for s in i.sections),
    )


def map_op_to_role(role: str) -> MembershipRole:
    """Map an op role ("MEMBER", "manager", ...) to the domain role.

    Raises:
        ValueError: If the role is not one the domain knows
    """
    try:
        return MembershipRole(role.lower())
    except ValueError as e:
        raise ValueError(f"invalid role: {role!r}") from e
