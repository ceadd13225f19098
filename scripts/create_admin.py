from __future__ import annotations

import argparse
import getpass

from sqlmodel import Session

from crimewatch.db.init_db import init_db
from crimewatch.db.session import engine
from crimewatch.services.user_service import ensure_admin_user


def main() -> None:
    parser = argparse.ArgumentParser(description='Create an admin account, or promote an existing user.')
    parser.add_argument('email', help='Admin email address')
    parser.add_argument('--name', default='Administrator', help='Display name for a new account')
    parser.add_argument('--password', help='Password (prompted when omitted)')
    parser.add_argument('--init-db', action='store_true', help='Create missing tables first')
    args = parser.parse_args()

    password = args.password or getpass.getpass('Password: ')
    if len(password) < 6:
        parser.error('password must be at least 6 characters')

    if args.init_db:
        init_db()

    with Session(engine) as session:
        user, created = ensure_admin_user(session, args.email, password, name=args.name)
    print(f"{'created' if created else 'promoted'} admin {user.email} ({user.id})")


if __name__ == '__main__':
    main()
