"""Tests for capability derivation from stored account state."""

from types import SimpleNamespace

from souq.core.permissions import PERMISSION_FLAGS, Capability, Principal, capabilities_for


def _perms(**granted):
    return SimpleNamespace(**{flag: granted.get(flag, False) for flag in PERMISSION_FLAGS})


def _user(type, *, id=1, is_primary=False, permissions=None):
    return SimpleNamespace(id=id, type=type, is_primary=is_primary, permissions=permissions)


def test_shopper_can_only_edit_own_account():
    assert capabilities_for(_user("user")) == {Capability.EDIT_OWN_ACCOUNT}


def test_artisan_capabilities():
    caps = capabilities_for(_user("artisan"))
    assert Capability.MANAGE_OWN_PROJECTS in caps
    assert Capability.EDIT_ARTISAN_PROFILE in caps
    assert Capability.ADMIN_CONSOLE not in caps


def test_primary_admin_has_everything():
    caps = capabilities_for(_user("admin", is_primary=True, permissions=_perms()))
    assert caps == set(Capability) - {Capability.MANAGE_OWN_PROJECTS, Capability.EDIT_ARTISAN_PROFILE}


def test_admin_without_flags_only_reaches_console():
    caps = capabilities_for(_user("admin", permissions=_perms()))
    assert caps == {Capability.EDIT_OWN_ACCOUNT, Capability.ADMIN_CONSOLE}


def test_admin_without_permission_row():
    caps = capabilities_for(_user("admin", permissions=None))
    assert Capability.MANAGE_PRODUCTS not in caps


def test_product_flag_also_grants_offers():
    caps = capabilities_for(_user("admin", permissions=_perms(can_manage_products=True)))
    assert Capability.MANAGE_PRODUCTS in caps
    assert Capability.MANAGE_OFFERS in caps
    assert Capability.MANAGE_PROJECTS not in caps


def test_admin_flag_only_grants_viewing_admins():
    caps = capabilities_for(_user("admin", permissions=_perms(can_manage_admins=True)))
    assert Capability.VIEW_ADMINS in caps
    assert Capability.MANAGE_ADMINS not in caps


def test_principal_ownership():
    principal = Principal.from_user(_user("artisan", id=5))
    assert principal.id == 5
    assert principal.owns(5)
    assert not principal.owns(6)
    assert not principal.owns(None)
    assert principal.can(Capability.MANAGE_OWN_PROJECTS)
    assert not principal.can(Capability.MANAGE_PRODUCTS)
