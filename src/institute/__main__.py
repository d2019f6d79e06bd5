"""Main entry point for the institute site backend."""

import argparse
import asyncio
import logging

import uvicorn
from aiosqlite import connect as aiosqlite_connect

from institute.app.app import create_app
from institute.app.auth import UserQueries
from institute.app.schema import initialize_tables
from institute.common import Role
from institute.config import AppConfig, configure_logging, load_config_from_env

LOGGER = logging.getLogger(__name__)


async def seed_admin(config: AppConfig) -> bool:
    """Prompt for and create a super admin account.

    :param config: Application configuration
    :return: True if the account was created
    """
    email, full_name, password = config.security_manager.initialize_super_admin_account()

    async with aiosqlite_connect(config.database_path) as db_connection:
        await initialize_tables(db_connection)
        user_queries = UserQueries(db_connection, config.security_manager)
        user, error = await user_queries.create_user(
            email,
            password,
            full_name,
            Role.SUPER_ADMIN,
        )

    if user is None:
        LOGGER.error("Could not create super admin account: %s", error)
        return False
    LOGGER.info("Created super admin account %s", user.email)
    return True


def main() -> None:
    """Run the FastAPI application using Uvicorn."""
    parser = argparse.ArgumentParser(
        description="Run the institute site backend.",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=".env",
        help="Path to the environment configuration file.",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run the FastAPI application on.",
    )
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to run the FastAPI application on.",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of worker processes to run.",
    )
    parser.add_argument(
        "--seed-admin",
        action="store_true",
        help="Interactively create a super admin account and exit.",
    )
    args = parser.parse_args()

    if args.seed_admin:
        config = load_config_from_env(args.env_file)
        configure_logging(config)
        created = asyncio.run(seed_admin(config))
        raise SystemExit(0 if created else 1)

    app = create_app(args.env_file)
    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=args.workers,
    )


if __name__ == "__main__":
    main()
