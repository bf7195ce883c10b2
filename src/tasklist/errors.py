# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy shared by the auth boundary, the task store and the HTTP layer."""

from __future__ import annotations


class TaskListError(Exception):
    """Base error. ``status_code`` is the HTTP status the API answers with."""

    status_code = 500

    def __init__(self, message: str = ""):
        self.message = message or self.__class__.__name__
        super().__init__(self.message)


class ValidationError(TaskListError):
    """Missing/empty required field or a field the caller may not set."""

    status_code = 400


class ConflictError(TaskListError):
    """Duplicate email on registration."""

    status_code = 400


class AuthError(TaskListError):
    """Missing/invalid token or bad credentials."""

    status_code = 401


class NotFoundError(TaskListError):
    status_code = 404
