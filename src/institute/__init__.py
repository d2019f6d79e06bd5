"""Institute site backend package."""

from institute.config import AppConfig, load_config_from_env

from .app.app import configure_fastapi_app, create_app

__all__ = ["AppConfig", "configure_fastapi_app", "create_app", "load_config_from_env"]
