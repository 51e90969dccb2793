#!/usr/bin/env python3
"""
Reset a user's password in the Apparel SQLite database.

This script does not read or reveal any existing password.  It stores
a fresh salt and PBKDF2‑HMAC‑SHA512 hash for the given username, using
the same helper as registration.

Usage:
    python reset_password.py --db ./apparel_api/apparel.db --username hepburn@bymyself.life --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sqlite3
import sys

from apparel_api.app.core.security import hash_password


def reset_password(db_path: str, username: str, password: str) -> bool:
    """Store a new hash for ``username``; return ``False`` if no such user."""
    salt, hashed, iterations = hash_password(password)
    conn = sqlite3.connect(db_path)
    try:
        cur = conn.cursor()
        cur.execute(
            "UPDATE users SET salt = ?, hash = ?, iterations = ?, updated_at = CURRENT_TIMESTAMP "
            "WHERE username = ?",
            (salt, hashed, iterations, username),
        )
        conn.commit()
        return cur.rowcount == 1
    finally:
        conn.close()


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Reset an Apparel user's password (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./apparel_api/apparel.db)")
    ap.add_argument("--username", required=True, help="Username to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args(argv)

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        return 1

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        return 1

    if not reset_password(args.db, args.username, new_password):
        print(f"[!] No user found with username: {args.username}", file=sys.stderr)
        return 2
    print(f"[+] Password updated for user: {args.username}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
