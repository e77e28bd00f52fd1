"""
Route gating for the web client.

Public pages (login, signup, password reset) are only for signed-out users and
send signed-in users home; every other page needs a session and sends
anonymous users to /login. Anything unknown goes home.
"""

import re
from typing import List, Optional, Tuple
from cgu_connect.modules.navigation.schemas import RouteDecision, NavLink

HOME = "/"
LOGIN = "/login"

PUBLIC = "public"
PROTECTED = "protected"

# (pattern, page, access)
ROUTES: List[Tuple[str, str, str]] = [
    ("/login", "Login", PUBLIC),
    ("/signup", "Signup", PUBLIC),
    ("/forgot-password", "ForgotPassword", PUBLIC),
    ("/", "Profile", PROTECTED),
    ("/search", "Search", PROTECTED),
    ("/user/:username", "UserProfile", PROTECTED),
    ("/connections", "Connections", PROTECTED),
    ("/messages", "Messages", PROTECTED),
    ("/messages/:username", "Messages", PROTECTED),
]

LAYOUT_LINKS = [
    NavLink(label="Profile", path="/"),
    NavLink(label="Search", path="/search"),
    NavLink(label="Connections", path="/connections"),
    NavLink(label="Messages", path="/messages"),
]


def _compile(pattern: str) -> "re.Pattern[str]":
    regex = re.sub(r":(\w+)", r"(?P<\1>[^/]+)", pattern)
    return re.compile(f"^{regex}$")


_COMPILED = [(_compile(pattern), page, access) for pattern, page, access in ROUTES]


def _normalize(path: str) -> str:
    path = (path or HOME).split("?", 1)[0].split("#", 1)[0]
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1:
        path = path.rstrip("/") or HOME
    return path


def match_route(path: str) -> Optional[Tuple[str, dict, str]]:
    """(page, params, access) of the route matching path, or None"""
    for regex, page, access in _COMPILED:
        match = regex.match(path)
        if match:
            return page, match.groupdict(), access
    return None


def resolve_route(path: str, authenticated: bool) -> RouteDecision:
    path = _normalize(path)
    matched = match_route(path)
    if matched is None:
        return RouteDecision(path=path, allowed=False, redirect_to=HOME)

    page, params, access = matched
    if access == PUBLIC and authenticated:
        return RouteDecision(path=path, page=page, params=params, allowed=False, redirect_to=HOME)
    if access == PROTECTED and not authenticated:
        return RouteDecision(path=path, page=page, params=params, allowed=False, redirect_to=LOGIN)
    return RouteDecision(path=path, page=page, params=params, allowed=True)
