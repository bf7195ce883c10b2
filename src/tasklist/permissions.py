# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Access gateway: every task route depends on ``require_owner``."""

from __future__ import annotations

from typing import Optional

from fastapi import Request

from tasklist.auth.authenticator import Authenticator
from tasklist.errors import AuthError

PLEASE_AUTHENTICATE = "Please authenticate"


def bearer_token(header: Optional[str]) -> str:
    """Token from an ``Authorization: Bearer <token>`` header value."""
    scheme, _, token = (header or "").strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise AuthError(PLEASE_AUTHENTICATE)
    return token


def require_owner(request: Request) -> str:
    """Resolve the caller's owner id or raise ``AuthError`` before the route runs."""
    token = bearer_token(request.headers.get("Authorization"))
    auth: Authenticator = request.app.state.authenticator
    try:
        owner_id = auth.verify(token)
    except AuthError:
        raise AuthError(PLEASE_AUTHENTICATE)
    # Reject tokens whose user is no longer in the credential store.
    if auth.users.get_by_id(owner_id) is None:
        raise AuthError(PLEASE_AUTHENTICATE)
    return owner_id
