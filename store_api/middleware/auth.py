import logging
from functools import wraps
from typing import Optional

from flask import current_app, g, request

from store_api.errors import Forbidden, InvalidToken, Unauthenticated
from store_api.services import get_services

logger = logging.getLogger(__name__)


def _header_token() -> Optional[str]:
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or token in ("undefined", "null", ""):
        return None
    return token


def _cookie_token() -> Optional[str]:
    return request.cookies.get(current_app.config["JWT_COOKIE_NAME"]) or None


def extract_token() -> Optional[str]:
    """Read the bearer token from the Authorization header or the auth cookie."""
    return _header_token() or _cookie_token()


def _authenticate():
    token = extract_token()
    if not token:
        raise Unauthenticated()
    g.current_user = get_services().auth.decode_token(token)


def require_auth(f):
    """Middleware to require JWT authentication."""
    @wraps(f)
    def decorated(*args, **kwargs):
        _authenticate()
        return f(*args, **kwargs)
    return decorated


def require_admin(f):
    """Middleware to require admin role."""
    @wraps(f)
    @require_auth
    def decorated(*args, **kwargs):
        if not g.current_user.is_admin:
            raise Forbidden()
        return f(*args, **kwargs)
    return decorated


def optional_auth(f):
    """Verify a token when one is sent; anonymous callers pass through.

    An explicit bearer token must be valid. A stale auth cookie is ignored
    and the caller is treated as anonymous.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        g.current_user = None
        auth = get_services().auth

        token = _header_token()
        if token:
            g.current_user = auth.decode_token(token)
            return f(*args, **kwargs)

        token = _cookie_token()
        if token:
            try:
                g.current_user = auth.decode_token(token)
            except InvalidToken:
                logger.info("Ignoring invalid auth cookie on %s", request.path)
        return f(*args, **kwargs)
    return decorated
