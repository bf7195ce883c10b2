# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Client side of the API.

- ``TokenStorage``: durable token persistence across restarts
- ``SessionController``: logged-in state and the local task list
"""
