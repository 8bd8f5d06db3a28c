"""
FastAPI dependencies for the auth routes.

The credential store, photo storage and settings are built once in
``create_app`` and kept on ``app.state``; these dependencies hand them to
route handlers so nothing is reached through module globals.
"""

from __future__ import annotations

from fastapi import Request

from auth.uploads import PhotoStorage
from config.settings import Settings
from database.store import CredentialStore


def get_credential_store(request: Request) -> CredentialStore:
    return request.app.state.store


def get_photo_storage(request: Request) -> PhotoStorage:
    return request.app.state.photos


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
