"""Local "public" disk: named writes, staged moves, deletes and public URLs."""

import logging
import shutil
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

from image_service.services.errors import StorageDeleteFailure, StorageWriteFailure, UnsafePath

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1 * 1024 * 1024  # 1 MiB


class PublicDisk:
    """Filesystem-backed storage area whose contents are served publicly."""

    def __init__(self, root: str | Path, temp_root: str | Path, base_url: str = "/storage"):
        self.root = Path(root)
        self.temp_root = Path(temp_root)
        self.base_url = base_url

    def path(self, relative: str) -> Path:
        root = self.root.resolve()
        if "\x00" in str(relative):
            raise UnsafePath(f"Invalid storage path: {relative!r}")
        try:
            target = (root / str(relative).lstrip("/\\")).resolve()
        except (OSError, ValueError) as exc:
            raise UnsafePath(f"Invalid storage path: {relative!r}") from exc
        if target != root and root not in target.parents:
            raise UnsafePath(f"Path escapes the storage root: {relative}")
        return target

    def _relative(self, target: Path) -> str:
        return target.relative_to(self.root.resolve()).as_posix()

    def _target(self, directory: str, file_name: str) -> Path:
        return self.path(f"{directory}/{file_name}" if directory else file_name)

    def exists(self, relative: str) -> bool:
        target = self.path(relative)
        try:
            return target.is_file()
        except OSError:
            return False

    def delete(self, relative: str) -> bool:
        target = self.path(relative)
        try:
            target.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            logger.error("[image] failed to delete %s: %s", relative, exc)
            raise StorageDeleteFailure(f"Could not delete {relative}") from exc
        logger.info("[image] deleted %s", relative)
        return True

    def store(self, stream: BinaryIO, directory: str, file_name: str) -> str:
        target = self._target(directory, file_name)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("wb") as sink:
                shutil.copyfileobj(stream, sink, CHUNK_SIZE)
        except OSError as exc:
            logger.error("[image] failed to store %s: %s", target, exc)
            raise StorageWriteFailure(f"Could not write {file_name}") from exc
        return self._relative(target)

    def put_file_as(self, source: Path, directory: str, file_name: str) -> str:
        target = self._target(directory, file_name)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, target)
        except OSError as exc:
            logger.error("[image] failed to move %s to %s: %s", source, target, exc)
            raise StorageWriteFailure(f"Could not write {file_name}") from exc
        return self._relative(target)

    @contextmanager
    def staged(self, stream: BinaryIO) -> Iterator[Path]:
        """Copy ``stream`` to the staging area and yield its path.

        The staged copy is removed on exit, whether or not the caller
        managed to finalize it.
        """
        staged_path = self.temp_root / f"upload_{uuid.uuid4().hex}"
        try:
            try:
                self.temp_root.mkdir(parents=True, exist_ok=True)
                with staged_path.open("wb") as sink:
                    shutil.copyfileobj(stream, sink, CHUNK_SIZE)
            except OSError as exc:
                logger.error("[image] failed to stage upload: %s", exc)
                raise StorageWriteFailure("Could not stage upload") from exc
            yield staged_path
        finally:
            staged_path.unlink(missing_ok=True)

    def url(self, relative: str) -> str:
        return f"{self.base_url.rstrip('/')}/{relative.lstrip('/')}"
