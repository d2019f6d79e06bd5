"""FastAPI application factory for the institute site backend."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

from aiosqlite import connect as aiosqlite_connect
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from institute.app.activity import ActivityQueries, configure_activity_router
from institute.app.auth import (
    UserQueries,
    Validate,
    configure_auth_router,
    configure_user_router,
)
from institute.app.content import (
    ContentResource,
    Course,
    CourseCreate,
    CourseQueries,
    CourseUpdate,
    Faculty,
    FacultyCreate,
    FacultyQueries,
    FacultyUpdate,
    FounderMessage,
    FounderMessageCreate,
    FounderMessageUpdate,
    FounderQueries,
    Notice,
    NoticeCreate,
    NoticeQueries,
    NoticeUpdate,
    configure_content_router,
    configure_notice_router,
)
from institute.app.inquiries import (
    EmailNotifier,
    InquiryIntake,
    InquiryQueries,
    configure_inquiry_router,
)
from institute.app.schema import initialize_tables
from institute.common import Role
from institute.config import configure_logging, load_config_from_env

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from aiosqlite import Connection

    from institute.app.inquiries import InquiryNotifier
    from institute.config import AppConfig

LOGGER = logging.getLogger(__name__)


async def seed_super_admin(config: AppConfig, user_queries: UserQueries) -> None:
    """Create the first super admin from configuration when no users exist.

    :param config: Application configuration carrying the seed credentials
    :param user_queries: User repository
    """
    if not (config.seed_admin_email and config.seed_admin_password):
        return

    if await user_queries.count_users() > 0:
        return

    user, error = await user_queries.create_user(
        config.seed_admin_email,
        config.seed_admin_password,
        config.seed_admin_name or "",
        Role.SUPER_ADMIN,
    )
    if user is None:
        LOGGER.error("Could not seed super admin account: %s", error)
        return
    LOGGER.info("Seeded super admin account %s", user.email)


def _content_resources(connection: Connection) -> dict[str, ContentResource]:
    return {
        "courses": ContentResource(
            name="course",
            queries=CourseQueries(connection),
            create_model=CourseCreate,
            update_model=CourseUpdate,
            response_model=Course,
            public_filters=("level",),
        ),
        "faculty": ContentResource(
            name="faculty",
            queries=FacultyQueries(connection),
            create_model=FacultyCreate,
            update_model=FacultyUpdate,
            response_model=Faculty,
        ),
        "founders": ContentResource(
            name="founder",
            queries=FounderQueries(connection),
            create_model=FounderMessageCreate,
            update_model=FounderMessageUpdate,
            response_model=FounderMessage,
        ),
    }


def configure_fastapi_app(
    config: AppConfig,
    notifier: InquiryNotifier | None = None,
) -> FastAPI:
    """Configure and return the FastAPI application.

    :param config: Application configuration
    :param notifier: Inquiry alert sender; built from the mail settings when omitted
    :return: Configured FastAPI application
    """
    if notifier is None and config.mail_enabled:
        notifier = EmailNotifier(
            api_key=config.mail_api_key,
            api_url=config.mail_api_url,
            sender=config.mail_from,
            institute_name=config.institute_name,
        )
    if notifier is None:
        LOGGER.warning("MAIL_API_KEY is not set, inquiry alerts are disabled")

    if not Path(config.database_path).parent.exists():
        Path(config.database_path).parent.mkdir(parents=True, exist_ok=True)
        LOGGER.info(
            "Created directory for database at %s",
            Path(config.database_path).parent,
        )

    if not Path(config.database_path).exists():
        LOGGER.info("Database file does not exist at %s", config.database_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[Any, Any]:
        """Application lifespan manager.

        Opens the database, seeds the first account and wires the routers.
        """
        LOGGER.info("%s API is starting", config.institute_name)

        async with aiosqlite_connect(config.database_path) as db_connection:
            await initialize_tables(db_connection)

            user_queries = UserQueries(db_connection, config.security_manager)
            await seed_super_admin(config, user_queries)

            validate = Validate(user_queries, config.security_manager)
            activity = ActivityQueries(db_connection)
            inquiries = InquiryQueries(db_connection)
            intake = InquiryIntake(inquiries, user_queries, notifier)

            app.state.user_queries = user_queries
            app.state.intake = intake

            auth_router = configure_auth_router(
                APIRouter(),
                user_queries,
                config.security_manager,
                validate,
            )
            user_router = configure_user_router(
                APIRouter(),
                user_queries,
                activity,
                validate,
            )
            app.include_router(auth_router, prefix="/auth", tags=["auth"])
            app.include_router(user_router, prefix="/users", tags=["users"])

            notice_resource = ContentResource(
                name="notice",
                queries=NoticeQueries(db_connection),
                create_model=NoticeCreate,
                update_model=NoticeUpdate,
                response_model=Notice,
                public_filters=("type", "priority"),
            )
            app.include_router(
                configure_notice_router(APIRouter(), notice_resource, validate, activity),
                prefix="/notices",
                tags=["notices"],
            )
            for prefix, resource in _content_resources(db_connection).items():
                app.include_router(
                    configure_content_router(APIRouter(), resource, validate, activity),
                    prefix=f"/{prefix}",
                    tags=[prefix],
                )

            app.include_router(
                configure_inquiry_router(
                    APIRouter(),
                    intake,
                    inquiries,
                    validate,
                    activity,
                ),
                prefix="/inquiries",
                tags=["inquiries"],
            )
            app.include_router(
                configure_activity_router(APIRouter(), activity, validate),
                prefix="/activity",
                tags=["activity"],
            )

            yield

            LOGGER.info("%s API is shutting down", config.institute_name)

    app = FastAPI(
        title=f"{config.institute_name} API",
        version="0.1.0",
        lifespan=lifespan,
        root_path=config.root_path,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def read_root() -> str:
        return f"{config.institute_name} API"

    return app


def create_app(env_file: str | None = os.environ.get("ENV_FILE", ".env")) -> FastAPI:
    """Create and configure the FastAPI application.

    The default here is for uvicorn command line usage, in which case the user
    should set ENV_FILE environment variable if they want a different file.

    :param env_file: Optional path to the environment configuration file
    :return: Configured FastAPI application
    """
    config = load_config_from_env(env_file)
    configure_logging(config)
    return configure_fastapi_app(config)
