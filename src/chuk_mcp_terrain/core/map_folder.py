"""
Map folder — the configured tile root and its archive mounts.

Tile file names are stored relative to the map root. Zip archives under the
root are mounted read-only with fuse-zip at ``<root>/<archive>.dir`` on first
use; the folder remembers every mount it made and releases them all in
``close_all()``.
"""

import logging
import os
import shutil
import subprocess
from pathlib import Path

from ..constants import (
    ARCHIVE_EXTENSION,
    MOUNT_COMMAND,
    MOUNT_DIR_SUFFIX,
    UNMOUNT_COMMAND,
    ErrorMessages,
)
from ..errors import AtlasError, MountError

logger = logging.getLogger(__name__)


class MapFolder:
    """Tile root directory plus a registry of mounted archives."""

    def __init__(
        self,
        root: str | Path,
        mount_command: str = MOUNT_COMMAND,
        unmount_command: str = UNMOUNT_COMMAND,
    ) -> None:
        self.root = Path(root)
        self.mount_command = mount_command
        self.unmount_command = unmount_command
        self._mounts: dict[str, Path] = {}

    def __enter__(self) -> "MapFolder":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close_all()

    def resolve(self, relative: str | Path) -> Path:
        """Absolute path of a file or directory relative to the root.

        Raises:
            AtlasError: If the path leads outside the root
        """
        path = self.root / relative
        root = Path(os.path.normpath(self.root.absolute()))
        if not Path(os.path.normpath(path.absolute())).is_relative_to(root):
            raise AtlasError(ErrorMessages.OUTSIDE_MAP_ROOT.format(relative, self.root))
        return path

    @staticmethod
    def mount_dir_name(archive: str) -> str:
        return f"{archive}{MOUNT_DIR_SUFFIX}"

    def is_mounted(self, archive: str) -> bool:
        return archive in self._mounts

    @property
    def mounted_archives(self) -> list[str]:
        return list(self._mounts)

    def mount(self, archive: str) -> str:
        """
        Mount a zip archive below the root, once per archive.

        Args:
            archive: Archive file name relative to the root

        Returns:
            Mount directory relative to the root
        """
        if not archive.endswith(ARCHIVE_EXTENSION):
            raise MountError(ErrorMessages.NOT_AN_ARCHIVE.format(archive))

        directory = self.mount_dir_name(archive)
        if archive in self._mounts:
            return directory

        absdir = self.resolve(directory)
        try:
            absdir.mkdir(parents=True, exist_ok=True)
            subprocess.run(
                [self.mount_command, "-r", str(self.resolve(archive)), str(absdir)],
                check=True,
                capture_output=True,
            )
        except (OSError, subprocess.CalledProcessError) as e:
            raise MountError(ErrorMessages.MOUNT_FAILED.format(archive, _describe(e))) from e

        logger.info(f"Mounted {archive} at {absdir}")
        self._mounts[archive] = absdir
        return directory

    def unmount(self, archive: str) -> None:
        """Unmount one archive and remove its mount directory."""
        absdir = self._mounts.get(archive)
        if absdir is None:
            return

        try:
            subprocess.run(
                [self.unmount_command, "-u", str(absdir)],
                check=True,
                capture_output=True,
            )
            absdir.rmdir()
        except (OSError, subprocess.CalledProcessError) as e:
            raise MountError(ErrorMessages.UNMOUNT_FAILED.format(archive, _describe(e))) from e

        del self._mounts[archive]
        logger.info(f"Unmounted {archive}")

    def close_all(self) -> None:
        """Unmount every archive this folder mounted.

        All archives are attempted; the first failure is raised afterwards.
        """
        first_error: MountError | None = None
        for archive in list(self._mounts):
            try:
                self.unmount(archive)
            except MountError as e:
                logger.error(str(e))
                if first_error is None:
                    first_error = e

        if first_error is not None:
            raise first_error

    @staticmethod
    def available() -> bool:
        """True if the fuse-zip binary is on PATH."""
        return shutil.which(MOUNT_COMMAND) is not None


def _describe(error: Exception) -> str:
    if isinstance(error, subprocess.CalledProcessError) and error.stderr:
        stderr = error.stderr
        if isinstance(stderr, bytes):
            stderr = stderr.decode(errors="replace")
        return stderr.strip()
    return str(error)
