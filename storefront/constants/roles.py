from enum import IntEnum


class Role(IntEnum):
    ADMIN = 1
    VENDOR = 2
    USER = 3


PUBLIC_PATHS = {"/", "/login", "/register", "/forgot-password", "/health", "/docs", "/openapi.json"}

# Signed-in users are sent away from these
GUEST_ONLY_PATHS = {"/login", "/register"}

PROTECTED_PREFIXES = ("/admin", "/vendor/", "/account", "/cart", "/checkout")

# role -> route prefixes that role may open
ROUTE_POLICY = {
    Role.ADMIN: ("/admin", "/vendor", "/account", "/cart", "/checkout"),
    Role.VENDOR: ("/vendor", "/account", "/cart", "/checkout"),
    Role.USER: ("/account", "/cart", "/checkout"),
}

# where a role lands when it opens a prefix it may not use
HOME_FOR_ROLE = {
    Role.ADMIN: "/admin",
    Role.VENDOR: "/vendor/dashboard",
    Role.USER: "/",
}

LOGIN_PATH = "/login"
