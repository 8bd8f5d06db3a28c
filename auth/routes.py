"""
Auth API routes — register, login.

Route prefix: ``config.api_prefix`` (``/api`` by default)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from auth.dependencies import get_credential_store, get_photo_storage, get_settings
from auth.errors import (
    DuplicateUsername,
    InvalidCredentials,
    MalformedRequest,
    StoreError,
    UserNotFound,
)
from auth.password import hash_password, verify_password
from auth.uploads import PhotoStorage, StagedPhoto, validate_username
from config.settings import Settings
from database.store import CredentialStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

CREATE_FAILED_MESSAGE = "Failed to create user"


# ── Request / response schemas ─────────────────────────────────────────


class LoginRequest(BaseModel):
    username: str
    password: str


class Envelope(BaseModel):
    success: bool
    message: str


def _has_content(upload: Optional[UploadFile]) -> bool:
    # Browsers send an empty, nameless part when no file was picked.
    return upload is not None and bool(upload.filename)


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post("/register", response_model=Envelope)
async def register(
    username: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    profile_photo: Optional[UploadFile] = File(None, alias="profilePhoto"),
    id_photo: Optional[UploadFile] = File(None, alias="idPhoto"),
    store: CredentialStore = Depends(get_credential_store),
    photos: PhotoStorage = Depends(get_photo_storage),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """Register a new user with optional profile and ID photos."""
    if not username or not password:
        raise MalformedRequest()
    validate_username(username)

    staged: List[StagedPhoto] = []
    committed = False
    try:
        for kind, upload in (("profile", profile_photo), ("id", id_photo)):
            if _has_content(upload):
                staged.append(
                    await run_in_threadpool(photos.stage, kind, username, upload.file)
                )

        password_hash = await run_in_threadpool(
            hash_password, password, settings.bcrypt_rounds
        )
        paths = {photo.kind: photo.relative_path for photo in staged}

        try:
            await store.insert_account(
                username,
                password_hash,
                profile_photo_path=paths.get("profile"),
                id_photo_path=paths.get("id"),
            )
        except DuplicateUsername as exc:
            if settings.report_duplicate_username:
                raise DuplicateUsername(
                    "Username already exists", status.HTTP_409_CONFLICT
                ) from exc
            raise DuplicateUsername(CREATE_FAILED_MESSAGE) from exc
        except StoreError as exc:
            raise type(exc)(CREATE_FAILED_MESSAGE) from exc
        committed = True
    finally:
        if not committed:
            photos.discard(staged)

    failed = await run_in_threadpool(photos.commit, staged)
    if failed:
        logger.warning(
            "Registered %s but %d photo(s) remain in staging", username, len(failed)
        )

    logger.info("Registered user %s (%d photo(s))", username, len(staged))
    return {"success": True, "message": "User registered successfully"}


@router.post("/login", response_model=Envelope)
async def login(
    req: LoginRequest,
    store: CredentialStore = Depends(get_credential_store),
) -> Dict[str, Any]:
    """Check a username + password pair against the stored hash."""
    password_hash = await store.find_password_hash(req.username)
    if password_hash is None:
        logger.info("Login failed: unknown user %s", req.username)
        raise UserNotFound()

    if not await run_in_threadpool(verify_password, req.password, password_hash):
        logger.info("Login failed: bad password for %s", req.username)
        raise InvalidCredentials()

    logger.info("Login: %s", req.username)
    return {"success": True, "message": "Login successful"}
