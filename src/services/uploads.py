"""Storage of uploaded images in a flat local directory.

Files are written while the request is still being validated, so every
route stages uploads through an ``UploadScope``: anything staged is removed
again unless the scope is committed after the owning record was saved.
"""

import logging
import secrets
import time
from collections.abc import Iterable
from pathlib import Path
from types import TracebackType

import aiofiles
from starlette.datastructures import UploadFile

from src.errors import BadRequestError, NotFoundError, UnsupportedMediaTypeError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"image/png", "image/jpg", "image/jpeg"}
CHUNK_SIZE = 1024 * 1024
UPLOADS_PATH = "/uploads/"


def sanitize_filename(filename: str | None) -> str:
    """Lowercase the client's file name and replace spaces with hyphens."""
    name = (filename or "").replace("\\", "/").split("/")[-1]
    name = name.lower().replace(" ", "-")
    return name or "upload"


def generate_stored_name(filename: str | None) -> str:
    """Prefix the sanitized file name with a millisecond timestamp and random hex."""
    return f"{int(time.time() * 1000)}{secrets.token_hex(10)}-{sanitize_filename(filename)}"


def public_url(host: str, name: str) -> str:
    """Reference saved on records for a stored file."""
    return f"{host}{UPLOADS_PATH}{name}"


def stored_name(reference: str | None) -> str | None:
    """Stored file name behind a record reference, or None for external URLs."""
    if not reference or UPLOADS_PATH not in reference:
        return None
    return reference.rsplit("/", 1)[-1] or None


class UploadManager:
    """Stages, resolves and discards files under a single upload root."""

    def __init__(self, root: str | Path, max_bytes: int = 10 * 1024 * 1024):
        self.root = Path(root).resolve()
        self.max_bytes = max_bytes

    def ensure_root(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def resolve(self, name: str) -> Path:
        """Absolute path of a stored file. Names with path components are rejected."""
        if not name or name in (".", "..") or Path(name).name != name or "\\" in name:
            raise NotFoundError("File not found")
        return self.root / name

    async def stage(self, upload: UploadFile) -> str:
        """Write an upload to disk and return its stored name."""
        if upload.content_type not in ALLOWED_IMAGE_TYPES:
            raise UnsupportedMediaTypeError("Only .png, .jpg and .jpeg image format allowed")

        self.ensure_root()
        name = generate_stored_name(upload.filename)
        path = self.resolve(name)
        size = 0
        try:
            async with aiofiles.open(path, "wb") as out_file:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_bytes:
                        raise BadRequestError(
                            f"File too large. Maximum size is {self.max_bytes // (1024 * 1024)}MB."
                        )
                    await out_file.write(chunk)
        except Exception:
            self.discard(name)
            raise

        logger.info(f"Staged upload {name} ({size} bytes)")
        return name

    def discard(self, name: str) -> bool:
        """Delete a stored file. A file that is already gone counts as deleted.

        Other filesystem errors are logged and reported through the return
        value only; callers never have to handle them.
        """
        try:
            path = self.resolve(name)
        except NotFoundError:
            return False
        if not path.exists():
            return True
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to delete upload {name}: {e}")
            return False
        logger.info(f"Discarded upload {name}")
        return True

    def discard_many(self, names: Iterable[str]) -> int:
        """Discard every name, continuing past failures. Returns how many are gone."""
        return sum(1 for name in names if self.discard(name))

    def discard_references(self, references: Iterable[str | None]) -> int:
        """Discard the local files behind record references."""
        return self.discard_many(name for name in map(stored_name, references) if name)

    def scope(self) -> "UploadScope":
        return UploadScope(self)


class UploadScope:
    """Per-request set of staged files with commit-or-discard semantics.

    Without ``commit()`` every staged file is discarded on exit. After
    ``commit()`` the staged files are kept and files registered through
    ``replace()`` (the ones the new files supersede) are discarded instead.
    """

    def __init__(self, manager: UploadManager):
        self.manager = manager
        self.staged: list[str] = []
        self.replaced: list[str] = []
        self.committed = False

    async def stage(self, upload: UploadFile) -> str:
        name = await self.manager.stage(upload)
        self.staged.append(name)
        return name

    def replace(self, reference: str | None) -> None:
        """Schedule the file behind ``reference`` for removal once committed."""
        name = stored_name(reference)
        if name:
            self.replaced.append(name)

    def commit(self) -> None:
        self.committed = True

    def __enter__(self) -> "UploadScope":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self.committed:
            self.manager.discard_many(self.replaced)
        else:
            self.manager.discard_many(self.staged)
