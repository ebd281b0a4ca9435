"""
Print a bcrypt hash to use as ADMIN_PASSWORD instead of a plain-text password.
Run from the repository root with .env loaded.

Usage:
  python scripts/hash_admin_password.py            # prompts for the password
  python scripts/hash_admin_password.py 's3cret'   # hashes the argument
"""
import getpass
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.core.security import hash_password


def main():
    if len(sys.argv) > 1:
        password = sys.argv[1]
    else:
        password = getpass.getpass("Admin password: ")
    if not password:
        print("Password cannot be empty", file=sys.stderr)
        sys.exit(1)
    print(hash_password(password))


if __name__ == "__main__":
    main()
