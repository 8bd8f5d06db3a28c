"""
Photo storage for registration uploads.

Uploads are first streamed into ``uploads/.staging`` under a unique name and
only moved to their final location once the account row has been committed.
If the insert fails the staged files are discarded, so a rejected
registration never leaves (or overwrites) photos on disk.

Final layout, relative to ``data_dir``::

    uploads/profile/profile_<username>.jpg
    uploads/id/id_<username>.jpg
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Iterable, List

from auth.errors import FileWriteFailure, MalformedRequest

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r"[A-Za-z0-9_.-]{1,64}")
PHOTO_KINDS = ("profile", "id")
PHOTO_EXTENSION = ".jpg"


def validate_username(username: str) -> str:
    """Reject anything that is unsafe to embed in a file name."""
    if not USERNAME_PATTERN.fullmatch(username):
        raise MalformedRequest("Invalid username")
    return username


@dataclass
class StagedPhoto:
    kind: str
    staged_path: Path
    final_path: Path
    relative_path: str


class PhotoStorage:
    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)
        self.staging_dir = self.data_dir / "uploads" / ".staging"

    def ensure_dirs(self) -> None:
        self.staging_dir.mkdir(parents=True, exist_ok=True)
        for kind in PHOTO_KINDS:
            (self.data_dir / "uploads" / kind).mkdir(parents=True, exist_ok=True)

    def relative_path(self, kind: str, username: str) -> str:
        if kind not in PHOTO_KINDS:
            raise ValueError(f"Unknown photo kind: {kind}")
        validate_username(username)
        name = f"{kind}_{username}{PHOTO_EXTENSION}"
        return str(PurePosixPath("uploads", kind, name))

    def stage(self, kind: str, username: str, source: BinaryIO) -> StagedPhoto:
        """Copy ``source`` into the staging area. Blocking; run it off the event loop."""
        relative = self.relative_path(kind, username)
        staged_path = self.staging_dir / f"{uuid.uuid4().hex}{PHOTO_EXTENSION}"
        try:
            self.staging_dir.mkdir(parents=True, exist_ok=True)
            with staged_path.open("wb") as buffer:
                shutil.copyfileobj(source, buffer)
        except OSError as exc:
            logger.error("Could not stage %s photo for %r: %s", kind, username, exc)
            staged_path.unlink(missing_ok=True)
            raise FileWriteFailure() from exc

        return StagedPhoto(
            kind=kind,
            staged_path=staged_path,
            final_path=self.data_dir / relative,
            relative_path=relative,
        )

    def commit(self, staged: Iterable[StagedPhoto]) -> List[StagedPhoto]:
        """
        Move staged photos into place.

        Runs after the account row exists, so failures are logged for
        out-of-band cleanup instead of failing the registration. Returns the
        photos that could not be moved.
        """
        failed = []
        for photo in staged:
            try:
                photo.final_path.parent.mkdir(parents=True, exist_ok=True)
                os.replace(photo.staged_path, photo.final_path)
            except OSError as exc:
                logger.error(
                    "Could not move %s into %s (left at %s): %s",
                    photo.kind, photo.final_path, photo.staged_path, exc,
                )
                failed.append(photo)
        return failed

    def discard(self, staged: Iterable[StagedPhoto]) -> None:
        for photo in staged:
            try:
                photo.staged_path.unlink(missing_ok=True)
            except OSError as exc:
                logger.warning("Could not remove staged file %s: %s", photo.staged_path, exc)
