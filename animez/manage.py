"""Maintenance commands.

    python -m animez.manage init-db
    python -m animez.manage create-admin-key [CODE]
"""
import argparse
import asyncio
import secrets

from animez.core import database
from animez.core.db.user_crud import create_admin_key
from animez.core.logger import logger


async def _create_admin_key(code: str) -> str:
    await database.init_db()
    async with database.async_session_maker() as session:
        admin_key = await create_admin_key(session, code)
    await database.engine.dispose()
    return admin_key.key_code


async def _init_db():
    await database.init_db()
    await database.engine.dispose()


def main(argv=None):
    parser = argparse.ArgumentParser(prog="animez.manage")
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("init-db", help="create database tables")
    key_parser = commands.add_parser("create-admin-key", help="issue a one-time admin code")
    key_parser.add_argument("code", nargs="?", help="code to issue (random if omitted)")
    args = parser.parse_args(argv)

    if args.command == "init-db":
        asyncio.run(_init_db())
        logger.info("Tables created")
    elif args.command == "create-admin-key":
        code = asyncio.run(_create_admin_key(args.code or secrets.token_urlsafe(12)))
        print(code)


if __name__ == "__main__":
    main()
