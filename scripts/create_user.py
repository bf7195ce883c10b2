#!/usr/bin/env python3
from __future__ import annotations

import os
from getpass import getpass
from pathlib import Path

from tasklist.auth.authenticator import Authenticator
from tasklist.auth.users import CredentialStore
from tasklist.errors import TaskListError
from tasklist.infra.document_store import DocumentStore

DATA_DIR = Path(os.getenv("TASKLIST_DATA_DIR", "data")).resolve()


def main() -> None:
    auth = Authenticator(CredentialStore(DocumentStore("yaml", DATA_DIR)))

    email = input("Email: ").strip()
    name = input("Name: ").strip()
    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    try:
        out = auth.register({"email": email, "password": pw1, "name": name})
    except TaskListError as e:
        raise SystemExit(str(e))
    print(f"OK -> {out['user']['id']} ({DATA_DIR / 'users.yml'})")
    print(f"token: {out['token']}")


if __name__ == "__main__":
    main()
