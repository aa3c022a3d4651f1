#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from soloauth.auth.passwords import hash_password
from soloauth.config import credentials_path, save_password_hash


def main() -> None:
    path = credentials_path()
    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")
    if not pw1:
        raise SystemExit("Empty password")

    save_password_hash(path, hash_password(pw1))
    print(f"OK -> {path}")


if __name__ == "__main__":
    main()
