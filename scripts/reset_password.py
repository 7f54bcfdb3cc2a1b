#!/usr/bin/env python3
"""
Set a JobTrack account's password from the command line.

For installs without outgoing mail, where the reset link can't be delivered.
Every session of the account is signed out.

    python scripts/reset_password.py someone@example.com 'new password'
"""
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from jobtrack.database import session_scope  # noqa: E402
from jobtrack.auth import accounts  # noqa: E402


def main(argv):
    if len(argv) != 2:
        print("usage: reset_password.py EMAIL NEW_PASSWORD", file=sys.stderr)
        return 2

    email, password = argv
    with session_scope() as db:
        user = accounts.find_user(db, email)
        if user is None:
            print(f"no account for {email}", file=sys.stderr)
            return 1
        try:
            accounts.set_password(db, user, password)
        except accounts.AccountError as e:
            print(e, file=sys.stderr)
            return 1

    print(f"password updated for {email}; all of its sessions were signed out")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
