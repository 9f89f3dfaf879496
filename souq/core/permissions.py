"""
Capability model.

The set of actions a caller may perform is computed once per request from
the stored user row and carried on a request-scoped :class:`Principal`.
Route guards check membership instead of re-deriving role rules.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from souq.models.user import User


class UserType(str, enum.Enum):
    USER = "user"
    ARTISAN = "artisan"
    ADMIN = "admin"


class Capability(str, enum.Enum):
    EDIT_OWN_ACCOUNT = "account:edit"
    MANAGE_OWN_PROJECTS = "projects:own"
    EDIT_ARTISAN_PROFILE = "profile:edit"
    ADMIN_CONSOLE = "admin:console"
    MANAGE_PRODUCTS = "products:manage"
    MANAGE_OFFERS = "offers:manage"
    MANAGE_PROJECTS = "projects:manage"
    MANAGE_ARTICLES = "articles:manage"
    MANAGE_USERS = "users:manage"
    VIEW_ADMINS = "admins:view"
    MANAGE_ADMINS = "admins:manage"


PERMISSION_FLAGS = (
    "can_manage_products",
    "can_manage_projects",
    "can_manage_users",
    "can_manage_admins",
    "can_manage_articles",
)

_FLAG_CAPABILITIES: dict[str, tuple[Capability, ...]] = {
    "can_manage_products": (Capability.MANAGE_PRODUCTS, Capability.MANAGE_OFFERS),
    "can_manage_projects": (Capability.MANAGE_PROJECTS,),
    "can_manage_users": (Capability.MANAGE_USERS,),
    "can_manage_admins": (Capability.VIEW_ADMINS,),
    "can_manage_articles": (Capability.MANAGE_ARTICLES,),
}

_ADMIN_CAPABILITIES = frozenset(
    {
        Capability.ADMIN_CONSOLE,
        Capability.MANAGE_PRODUCTS,
        Capability.MANAGE_OFFERS,
        Capability.MANAGE_PROJECTS,
        Capability.MANAGE_ARTICLES,
        Capability.MANAGE_USERS,
        Capability.VIEW_ADMINS,
        Capability.MANAGE_ADMINS,
    }
)


def capabilities_for(user: "User") -> frozenset[Capability]:
    caps = {Capability.EDIT_OWN_ACCOUNT}

    if user.type == UserType.ARTISAN.value:
        caps |= {Capability.MANAGE_OWN_PROJECTS, Capability.EDIT_ARTISAN_PROFILE}

    elif user.type == UserType.ADMIN.value:
        if user.is_primary:
            return frozenset(caps | _ADMIN_CAPABILITIES)
        caps.add(Capability.ADMIN_CONSOLE)
        perms = user.permissions
        if perms is not None:
            for flag, granted in _FLAG_CAPABILITIES.items():
                if getattr(perms, flag):
                    caps.update(granted)

    return frozenset(caps)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller of one request."""

    user: "User"
    capabilities: frozenset[Capability] = field(default_factory=frozenset)

    @classmethod
    def from_user(cls, user: "User") -> "Principal":
        return cls(user=user, capabilities=capabilities_for(user))

    @property
    def id(self) -> int:
        return self.user.id

    def can(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def owns(self, owner_id: int | None) -> bool:
        return owner_id is not None and owner_id == self.user.id
