"""
AdoptMe Backend - Upload Storage Service
=========================================

What:  Validates and stores uploaded files (pet images, user documents,
       profile pictures) on the local upload volume.
How:   The multipart field name selects the destination folder; files are
       written asynchronously with aiofiles as
       `<upload_root>/<folder>/<epoch-millis>-<original filename>`.
Who:   PetService (create with image), UserService (document uploads).

Folder Routing:
    image, petImage        → pets/
    document, documents    → documents/
    profile                → profiles/
    anything else          → uploads/

Safety:
    - Only the basename of the client filename is kept (no path traversal)
    - Empty and oversized files are rejected before touching the disk
    - A name collision within the same millisecond gets a numeric suffix
"""

import logging
import os
import time
from pathlib import Path
from typing import Optional, Tuple

import aiofiles

from adoptme.exceptions import FileStorageError, ValidationError

logger = logging.getLogger(__name__)

# ── Folder Routing ────────────────────────────────────────────────────────
FIELD_FOLDERS = {
    "image": "pets",
    "petImage": "pets",
    "document": "documents",
    "documents": "documents",
    "profile": "profiles",
}
DEFAULT_FOLDER = "uploads"


class FileService:
    """
    Manages the upload lifecycle: validate → store → (on failure) cleanup.

    Directory Structure:
        public/
        ├── pets/
        │   └── 1718000000000-rex.jpg
        ├── documents/
        │   └── 1718000000123-id-card.pdf
        └── profiles/
    """

    def __init__(self, upload_root: str, max_upload_size: int):
        self.upload_root = Path(upload_root).resolve()
        self.max_upload_size = max_upload_size
        self.upload_root.mkdir(parents=True, exist_ok=True)
        logger.info("FileService initialized with upload_root=%s", self.upload_root)

    @staticmethod
    def folder_for_field(field_name: str) -> str:
        return FIELD_FOLDERS.get(field_name, DEFAULT_FOLDER)

    @staticmethod
    def safe_filename(filename: Optional[str]) -> str:
        """Strip directory components from a client-supplied filename."""
        name = Path((filename or "").replace("\\", "/")).name.strip()
        if not name or name in {".", ".."}:
            return "upload"
        return name

    def validate_size(self, actual_size: int, filename: str) -> None:
        """
        Reject empty files and files above MAX_UPLOAD_SIZE.

        Raises:
            ValidationError with a human-readable message
        """
        if actual_size == 0:
            raise ValidationError(
                message=f"Uploaded file '{filename}' is empty",
                field="file",
            )
        if actual_size > self.max_upload_size:
            max_mb = self.max_upload_size / (1024 * 1024)
            raise ValidationError(
                message=f"File size ({actual_size / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB.",
                field="file",
                context={"actual_size": actual_size, "max_size": self.max_upload_size},
            )

    def _build_storage_path(self, folder: str, filename: str) -> Tuple[Path, str]:
        """Returns (absolute_path, reference relative to the upload root)."""
        stamp = int(time.time() * 1000)
        candidate = f"{stamp}-{filename}"
        absolute_path = self.upload_root / folder / candidate
        counter = 1
        while absolute_path.exists():
            stem, suffix = os.path.splitext(filename)
            candidate = f"{stamp}-{stem}-{counter}{suffix}"
            absolute_path = self.upload_root / folder / candidate
            counter += 1
        return absolute_path, f"{folder}/{candidate}"

    async def store_file(self, field_name: str, filename: str, content: bytes) -> Tuple[str, str]:
        """
        Write validated content to disk.

        Returns:
            (absolute_path, reference)

        Raises:
            FileStorageError if the directory or the file cannot be written
        """
        folder = self.folder_for_field(field_name)
        absolute_path, reference = self._build_storage_path(folder, filename)

        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded file. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            )

        logger.info("File stored: %s (%d bytes)", reference, len(content))
        return str(absolute_path), reference

    def resolve(self, reference: str) -> Path:
        return self.upload_root / reference

    async def cleanup_file(self, reference: str) -> None:
        """
        Best-effort removal of a stored file, used when the database write
        that should have referenced it fails. Never raises.
        """
        path = self.resolve(reference)
        try:
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up file: %s", reference)
            else:
                logger.debug("Cleanup: file already gone: %s", reference)
        except OSError as e:
            logger.warning("Failed to clean up file %s: %s", reference, str(e))

    async def validate_and_store(
        self,
        field_name: str,
        filename: Optional[str],
        content: bytes,
    ) -> Tuple[str, str]:
        """
        Complete upload pipeline: sanitize name, check size, write.

        Returns:
            (original_safe_filename, reference)
        """
        name = self.safe_filename(filename)
        self.validate_size(len(content), name)
        _, reference = await self.store_file(field_name, name, content)
        return name, reference
