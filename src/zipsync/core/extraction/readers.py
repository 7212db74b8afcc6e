from __future__ import annotations

"""
Archive Reader Capability.

Wraps the standard library archive modules behind one small interface:
list entries in archive order, and open an entry's content stream. The
extractor never touches zipfile or tarfile directly.
"""

import logging
import stat
import tarfile
import zipfile
from typing import IO, Iterator, Optional

from zipsync.domain.constants import TAR_SUFFIXES
from zipsync.domain.errors import ArchiveOpenError
from zipsync.domain.extraction_models import ArchiveEntry

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# READERS
# -----------------------------------------------------------------------------

class ArchiveReader:
    """Base reader; subclasses yield ArchiveEntry objects in archive order."""

    def __init__(self, path: str) -> None:
        self.path = path

    def entries(self) -> Iterator[ArchiveEntry]:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError

    def __enter__(self) -> "ArchiveReader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class ZipArchiveReader(ArchiveReader):
    """Reader over zipfile.ZipFile."""

    def __init__(self, path: str) -> None:
        super().__init__(path)
        try:
            self._zf = zipfile.ZipFile(path)
        except (OSError, zipfile.BadZipFile, zipfile.LargeZipFile) as e:
            raise ArchiveOpenError(f"Cannot open zip archive '{path}': {e}", path=path) from e

    def entries(self) -> Iterator[ArchiveEntry]:
        for info in self._zf.infolist():
            unix_mode = info.external_attr >> 16
            is_link = stat.S_ISLNK(unix_mode)
            yield ArchiveEntry(
                name=info.filename,
                is_dir=info.is_dir(),
                mode=stat.S_IMODE(unix_mode),
                opener=self._opener(info),
                is_regular=not is_link,
            )

    def _opener(self, info: zipfile.ZipInfo):
        def _open() -> IO[bytes]:
            # zipfile reports encrypted entries with RuntimeError and unknown
            # compression methods with NotImplementedError
            try:
                return self._zf.open(info)
            except (RuntimeError, NotImplementedError) as e:
                raise ArchiveOpenError(
                    f"Cannot read entry '{info.filename}' from '{self.path}': {e}", path=self.path
                ) from e
        return _open

    def close(self) -> None:
        self._zf.close()


class TarArchiveReader(ArchiveReader):
    """Reader over tarfile.TarFile (plain or compressed)."""

    def __init__(self, path: str) -> None:
        super().__init__(path)
        try:
            self._tf = tarfile.open(path, mode="r:*")
        except (OSError, tarfile.TarError) as e:
            raise ArchiveOpenError(f"Cannot open tar archive '{path}': {e}", path=path) from e

    def entries(self) -> Iterator[ArchiveEntry]:
        while True:
            try:
                member = self._tf.next()
            except tarfile.TarError as e:
                raise ArchiveOpenError(f"Corrupt tar archive '{self.path}': {e}", path=self.path) from e
            if member is None:
                return
            yield ArchiveEntry(
                name=member.name,
                is_dir=member.isdir(),
                mode=stat.S_IMODE(member.mode),
                opener=self._opener(member),
                is_regular=member.isreg() or member.isdir(),
            )

    def _opener(self, member: tarfile.TarInfo):
        def _open() -> IO[bytes]:
            stream: Optional[IO[bytes]] = self._tf.extractfile(member)
            if stream is None:
                raise OSError(f"No data stream for member '{member.name}'")
            return stream
        return _open

    def close(self) -> None:
        self._tf.close()

# -----------------------------------------------------------------------------
# FACTORY
# -----------------------------------------------------------------------------

def open_archive(path: str) -> ArchiveReader:
    """
    Open the archive at path with the reader matching its format.

    Tar suffixes select the tar reader; anything else is read as zip.

    Raises:
        ArchiveOpenError: If the file is missing, corrupt or unreadable.
    """
    if path.lower().endswith(TAR_SUFFIXES):
        logger.debug(f"Opening tar archive: {path}")
        return TarArchiveReader(path)
    logger.debug(f"Opening zip archive: {path}")
    return ZipArchiveReader(path)
