# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os

from itsdangerous import BadSignature, BadTimeSignature, SignatureExpired, URLSafeTimedSerializer

from tasklist.errors import AuthError

DEFAULT_MAX_AGE_SECONDS = int(os.getenv("TASKLIST_TOKEN_MAX_AGE", "604800"))  # 7 days


def _serializer() -> URLSafeTimedSerializer:
    secret = os.getenv("SECRET_KEY") or os.getenv("TASKLIST_SECRET_KEY")
    if not secret:
        raise RuntimeError("Missing SECRET_KEY (or TASKLIST_SECRET_KEY) in environment")
    salt = os.getenv("TASKLIST_TOKEN_SALT", "tasklist.token.v1")
    return URLSafeTimedSerializer(secret_key=secret, salt=salt)


def sign_token(user_id: str) -> str:
    """Issue a bearer token bound to ``user_id``."""
    return _serializer().dumps({"id": user_id})


def verify_token(token: str, *, max_age: int = DEFAULT_MAX_AGE_SECONDS) -> str:
    """Return the user id bound to ``token`` or raise ``AuthError``."""
    if not token:
        raise AuthError("Please authenticate")
    s = _serializer()
    try:
        data = s.loads(token, max_age=max_age)
    except SignatureExpired:
        raise AuthError("Token expired")
    except (BadTimeSignature, BadSignature):
        raise AuthError("Please authenticate")
    uid = data.get("id") if isinstance(data, dict) else None
    if not uid or not isinstance(uid, str):
        raise AuthError("Please authenticate")
    return uid
