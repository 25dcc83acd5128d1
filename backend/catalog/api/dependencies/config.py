"""Settings dependency."""

from fastapi import Request

from catalog.core.config import Settings


def get_app_settings(request: Request) -> Settings:
    """Return the settings object the app was built with."""
    return request.app.state.settings
