"""HabitMaster application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable

from flask import Flask

from .config import BaseConfig, DevConfig, TestConfig

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths."""

    yield "habitmaster.blueprints.habits"


def create_app(config_name: str | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__, instance_relative_config=True)
    config_cls = _resolve_config(config_name or app.config.get("ENV"))
    config_obj = config_cls()
    app.config.from_object(config_obj)
    app.config["HABITMASTER_CONFIG"] = config_obj

    # Imported lazily so that importing the package does not build SQLModel mappers.
    from . import cli
    from .extensions import init_db
    from .logging_config import setup_logging

    setup_logging(config_obj)
    _register_blueprints(app)
    init_db(app)
    cli.init_app(app)

    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


__all__ = ["BaseConfig", "DevConfig", "TestConfig", "create_app"]
