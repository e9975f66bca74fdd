"""
FastAPI dependencies that hand out process-wide collaborators.

The storage instance is created by the entry point and attached to
``app.state``; handlers only ever receive it through :func:`get_storage`.
"""
from fastapi import Request

from .config import Settings
from .storage import Storage


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
