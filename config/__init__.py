import importlib
import os
from types import ModuleType

_ENVIRONMENTS = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
}


def get_settings_module() -> str:
    """Dotted path of the settings module selected by ``APP_ENV`` (default development)."""
    env = os.getenv("APP_ENV", "development").strip().lower()
    return _ENVIRONMENTS.get(env, "config.development")


def load_settings() -> ModuleType:
    return importlib.import_module(get_settings_module())
