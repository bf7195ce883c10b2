# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Any, Dict

from tasklist.auth.passwords import hash_password, verify_password
from tasklist.auth.tokens import sign_token, verify_token
from tasklist.auth.users import CredentialStore, UserRecord
from tasklist.errors import AuthError, ConflictError, ValidationError
from tasklist.schemas import LoginIn, RegisterIn, parse

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def _session_payload(user: UserRecord) -> Dict[str, Any]:
    return {"token": sign_token(user.id), "user": user.public()}


class Authenticator:
    """Registration, login and token verification over a credential store."""

    def __init__(self, users: CredentialStore):
        self.users = users

    def register(self, body: Any) -> Dict[str, Any]:
        data = parse(RegisterIn, body)
        if not data.email or not data.password or not data.name:
            raise ValidationError("All fields are required")

        # Cheap pre-check; the store's unique index is the authority.
        if self.users.get_by_email(data.email) is not None:
            raise ConflictError("Email already registered")

        user = self.users.create(
            email=data.email,
            name=data.name,
            password_hash=hash_password(data.password),
        )
        logger.info("Registered user id=%s", user.id)
        return _session_payload(user)

    def login(self, body: Any) -> Dict[str, Any]:
        data = parse(LoginIn, body)
        user = self.users.get_by_email(data.email)
        # Same error for unknown email and wrong password.
        if user is None or not verify_password(user.password_hash, data.password):
            logger.info("Login rejected")
            raise AuthError(INVALID_CREDENTIALS)
        return _session_payload(user)

    def verify(self, token: str) -> str:
        """Owner id bound to ``token``. Stateless: the credential store is not read."""
        return verify_token(token)
