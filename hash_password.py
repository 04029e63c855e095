#!/usr/bin/env python3
"""Print an Argon2 hash of the instructor password for TEACHER_PASSWORD.

Usage:
    python hash_password.py              # prompts twice, nothing echoed
    python hash_password.py 'password'   # non-interactive
"""
import getpass
import sys

from attendance.core.security import get_password_hash

MIN_PASSWORD_LENGTH = 8


def read_password(argv) -> str:
    if len(argv) == 2:
        return argv[1]
    if len(argv) > 2:
        sys.exit("Usage: python hash_password.py ['password']")

    password = getpass.getpass("Teacher password: ")
    if getpass.getpass("Repeat password: ") != password:
        sys.exit("Error: passwords do not match")
    return password


def main(argv) -> None:
    password = read_password(argv)
    if len(password) < MIN_PASSWORD_LENGTH:
        sys.exit(f"Error: password must be at least {MIN_PASSWORD_LENGTH} characters long")

    password_hash = get_password_hash(password)

    print("Add this to your .env file (the instructor logs in with TEACHER_EMAIL):")
    print(f"TEACHER_PASSWORD={password_hash}")


if __name__ == "__main__":
    main(sys.argv)
