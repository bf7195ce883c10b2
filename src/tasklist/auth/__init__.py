# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication helpers.

This package provides:
- Password hashing/verification (argon2)
- Credential records stored in the document store
- Signed, expiring bearer tokens (itsdangerous)
"""
