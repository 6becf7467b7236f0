from src.server.settings.config import settings, Settings  # noqa: F401
