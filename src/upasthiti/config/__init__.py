import os


def get_settings_module() -> str:
    # Environment comes from APP_ENV, defaulting to 'development'
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "upasthiti.config.production"

    if env in {"test", "testing"}:
        return "upasthiti.config.testing"

    return "upasthiti.config.development"
