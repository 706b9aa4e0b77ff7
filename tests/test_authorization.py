import pytest

from storefront.constants.roles import Role
from storefront.services.authorization import AuthorizationPolicy


@pytest.fixture
def policy():
    return AuthorizationPolicy()


@pytest.mark.parametrize("path", ["/", "/login", "/register", "/health"])
def test_public_paths_open_to_guests(policy, path):
    assert policy.evaluate(path, None, False).allowed


@pytest.mark.parametrize("path", ["/cart/", "/checkout/", "/account/me", "/admin", "/vendor/dashboard"])
def test_guest_sent_to_login(policy, path):
    decision = policy.evaluate(path, None, False)
    assert not decision.allowed
    assert decision.status_code == 401
    assert decision.redirect_to == "/login"


@pytest.mark.parametrize(
    "role,path,allowed",
    [
        (Role.USER, "/checkout/place-order", True),
        (Role.USER, "/cart/items/3", True),
        (Role.USER, "/admin/users", False),
        (Role.USER, "/vendor/dashboard", False),
        (Role.VENDOR, "/vendor/dashboard", True),
        (Role.VENDOR, "/checkout/", True),
        (Role.VENDOR, "/admin", False),
        (Role.ADMIN, "/admin/users", True),
        (Role.ADMIN, "/vendor/products", True),
        (Role.ADMIN, "/checkout/", True),
    ],
)
def test_role_table(policy, role, path, allowed):
    assert policy.evaluate(path, role, True).allowed is allowed


def test_forbidden_redirects_to_role_home(policy):
    decision = policy.evaluate("/admin", Role.VENDOR, True)
    assert decision.status_code == 403
    assert decision.redirect_to == "/vendor/dashboard"


def test_unknown_role_gets_nothing_protected(policy):
    decision = policy.evaluate("/cart/", None, True)
    assert decision.status_code == 403
    assert decision.redirect_to == "/"


def test_signed_in_user_leaves_login_page(policy):
    decision = policy.evaluate("/login", Role.USER, True)
    assert not decision.allowed
    assert decision.status_code == 303
    assert decision.redirect_to == "/"


def test_unlisted_path_is_open(policy):
    assert policy.evaluate("/products/42", None, False).allowed


def test_custom_table():
    policy = AuthorizationPolicy(policy={Role.USER: ("/cart",)})
    assert policy.evaluate("/cart/", Role.USER, True).allowed
    assert not policy.evaluate("/checkout/", Role.USER, True).allowed
