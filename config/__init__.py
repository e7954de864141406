import os

SETTINGS_MODULES = {
    "development": "config.development",
    "dev": "config.development",
    "production": "config.production",
    "prod": "config.production",
    "testing": "config.testing",
    "test": "config.testing",
}


def get_settings_module() -> str:
    """Settings module for the current process.

    ``HRIS_SETTINGS_MODULE`` names a module directly; otherwise ``APP_ENV``
    picks one of the bundled ones and anything unknown falls back to
    development.
    """

    explicit = os.getenv("HRIS_SETTINGS_MODULE", "").strip()
    if explicit:
        return explicit

    env = os.getenv("APP_ENV", "development").strip().lower()
    return SETTINGS_MODULES.get(env, "config.development")
