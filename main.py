#!/usr/bin/env python3
"""
RusTour session client

Signs in, registers and signs out against the RusTour API from the
command line, using the same session manager as the app.
"""

import argparse
import asyncio
import getpass
import logging
import sys
from typing import Optional

from rustour.config import load_config
from rustour.services import ServiceContext, SessionManager, AuthResult, create_services

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def display_result(result: AuthResult, action: str) -> int:
    """Print an operation result and return the exit code."""
    if not result.success:
        print(f"Error: {result.error.message}")
        return 1

    if result.user:
        user = result.user
        print(f"{action} as {user.full_name} <{user.email}> ({user.role})")
    else:
        print(f"{action}.")
    return 0


def display_status(session: SessionManager):
    """Print the persisted session state."""
    if session.token:
        print(f"Session token stored in {session.token_store.path}")
    else:
        print("Not signed in.")


def read_password(password: Optional[str]) -> str:
    return password if password is not None else getpass.getpass("Password: ")


async def run_command(args: argparse.Namespace, context: ServiceContext) -> int:
    """Dispatch a parsed command against a session."""
    _, session = create_services(context)

    try:
        if args.command == "login":
            result = await session.sign_in(args.email, read_password(args.password))
            return display_result(result, "Signed in")

        if args.command == "register":
            result = await session.register(
                args.first_name,
                args.last_name,
                args.email,
                read_password(args.password),
                role=args.role
            )
            return display_result(result, "Registered")

        if args.command == "logout":
            session.sign_out()
            print("Signed out.")
            return 0

        display_status(session)
        return 0
    finally:
        await context.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="RusTour session client")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--base-url",
        help="Override the API base URL (default: RUSTOUR_API_BASE_URL)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    login = subparsers.add_parser("login", help="Sign in and store the session token")
    login.add_argument("email")
    login.add_argument("--password", "-p", help="Password (prompted if omitted)")

    register = subparsers.add_parser("register", help="Register a new account")
    register.add_argument("first_name")
    register.add_argument("last_name")
    register.add_argument("email")
    register.add_argument("--password", "-p", help="Password (prompted if omitted)")
    register.add_argument("--role", default="User", help="Account role (default: User)")

    subparsers.add_parser("logout", help="Clear the stored session")
    subparsers.add_parser("status", help="Show whether a session token is stored")

    return parser


def main(argv: Optional[list] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    config = load_config()
    if args.base_url:
        config.api_base_url = args.base_url

    try:
        context = ServiceContext.create(config)
    except ValueError as e:
        logger.error(str(e))
        return 2

    try:
        return asyncio.run(run_command(args, context))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
