"""Tests for command line seeding of the first account."""

from pathlib import Path
from unittest.mock import patch

import aiosqlite
import pytest
from conftest import TEST_PASSWORD, TEST_SECRET_KEY

from institute.__main__ import seed_admin
from institute.app.app import seed_super_admin
from institute.app.auth import UserQueries
from institute.app.schema import initialize_tables
from institute.common import Role
from institute.config import AppConfig


def _config(database_path: Path, **seed: str) -> AppConfig:
    return AppConfig(
        database_path=str(database_path),
        logging_level="INFO",
        root_path="",
        secret_key=TEST_SECRET_KEY,
        algorithm="HS512",
        access_token_expire_minutes=60,
        password_min_length=8,
        mail_api_key=None,
        mail_api_url="https://mail.test/emails",
        mail_from="Site <site@mail.test>",
        institute_name="Hans Educational Institute",
        **seed,
    )


@pytest.mark.asyncio
class TestSeeding:
    """Test suite for creating the first super admin."""

    async def test_interactive_seed(self, tmp_path: Path) -> None:
        config = _config(tmp_path / "site.db")

        with patch.object(
            config.security_manager,
            "initialize_super_admin_account",
            return_value=("owner@hans.edu.np", "Owner", TEST_PASSWORD),
        ):
            assert await seed_admin(config)

        async with aiosqlite.connect(config.database_path) as connection:
            await initialize_tables(connection)
            users = await UserQueries(connection, config.security_manager).list_users()

        assert [(user.email, user.role) for user in users] == [
            ("owner@hans.edu.np", Role.SUPER_ADMIN),
        ]

    async def test_interactive_seed_reports_duplicate(self, tmp_path: Path) -> None:
        config = _config(tmp_path / "site.db")

        with patch.object(
            config.security_manager,
            "initialize_super_admin_account",
            return_value=("owner@hans.edu.np", "Owner", TEST_PASSWORD),
        ):
            assert await seed_admin(config)
            assert not await seed_admin(config)

    async def test_startup_seed_only_when_empty(self, user_queries: UserQueries) -> None:
        config = _config(
            Path("unused.db"),
            seed_admin_email="owner@hans.edu.np",
            seed_admin_password=TEST_PASSWORD,
        )
        await user_queries.create_user("first@hans.edu.np", TEST_PASSWORD, "First", Role.ADMIN)

        await seed_super_admin(config, user_queries)

        assert await user_queries.count_users() == 1

    async def test_startup_seed_without_credentials(self, user_queries: UserQueries) -> None:
        await seed_super_admin(_config(Path("unused.db")), user_queries)

        assert await user_queries.count_users() == 0
