# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

import io
import logging
import zipfile
import zlib
from typing import Iterator

from dd_license_notice.adaptors.os import (
    get_absolute_path,
    is_file,
    is_symlink,
    path_join,
    read_binary_file,
    relative_path,
    walk_directory,
    write_binary_file_atomically,
)
from dd_license_notice.model.identifier import PackageIdentifier
from dd_license_notice.model.provenance import Provenance
from dd_license_notice.storage.file_storage import (
    FileStorage,
    IOFailure,
    StorageKeyNotFound,
)
from dd_license_notice.utils.file_matcher import FileMatcher

# Get application-specific logger
logger = logging.getLogger("dd_license_notice")

ARCHIVE_FILE_NAME = "archive.zip"
VCS_DIRECTORIES = {".git", ".hg", ".svn"}
# a fixed timestamp makes archives of identical files byte-identical
ZIP_DATE_TIME = (1980, 1, 1, 0, 0, 0)


class ArchiveCorrupt(Exception):
    """Exception raised when a stored archive exists but cannot be extracted."""

    pass


def get_archive_storage_path(
    package_id: PackageIdentifier, provenance: Provenance
) -> str:
    return f"{package_id.to_path()}/{provenance.storage_hash()}"


class FileArchiver:
    """Archive the files matched by glob patterns as one zip in a FileStorage."""

    def __init__(self, patterns: list[str], storage: FileStorage) -> None:
        self.patterns = patterns
        self.storage = storage
        self.matcher = FileMatcher(patterns)

    @staticmethod
    def get_archive_path(storage_path: str) -> str:
        return f"{storage_path.rstrip('/')}/{ARCHIVE_FILE_NAME}"

    @staticmethod
    def archived_files(directory: str) -> Iterator[str]:
        """Lazily list the regular files below directory as sorted relative paths.

        VCS metadata and symbolic links are skipped so nothing outside of
        directory is ever read.
        """
        for root, dirs, files in walk_directory(directory):
            dirs[:] = sorted(d for d in dirs if d not in VCS_DIRECTORIES)
            for file_name in sorted(files):
                file_path = path_join(root, file_name)
                if is_file(file_path) and not is_symlink(file_path):
                    yield relative_path(file_path, directory).replace("\\", "/")

    def _matching_files(self, directory: str) -> Iterator[str]:
        for relative in self.archived_files(directory):
            if self.matcher.matches(relative):
                logger.debug(f"Adding '{relative}' to archive.")
                yield relative
            else:
                logger.debug(f"Not adding '{relative}' to archive.")

    def archive(self, directory: str, storage_path: str) -> None:
        """Zip the matching files of directory and store them at storage_path/archive.zip.

        The zip is built in memory and handed to the storage in a single write.

        Raises:
            IOFailure: If the storage could not be written
        """
        buffer = io.BytesIO()
        archived = 0
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zip_file:
            for relative in self._matching_files(directory):
                info = zipfile.ZipInfo(relative, date_time=ZIP_DATE_TIME)
                info.compress_type = zipfile.ZIP_DEFLATED
                info.external_attr = 0o644 << 16
                zip_file.writestr(
                    info, read_binary_file(path_join(directory, relative))
                )
                archived += 1

        archive_path = self.get_archive_path(storage_path)
        self.storage.write(archive_path, buffer.getvalue())
        logger.info(f"Archived {archived} file(s) from {directory} to {archive_path}.")

    def unarchive(self, directory: str, storage_path: str) -> bool:
        """Extract the archive stored at storage_path into directory.

        Returns:
            True if the archive was extracted, False if there is no readable archive

        Raises:
            ArchiveCorrupt: If the archive exists but cannot be extracted
        """
        archive_path = self.get_archive_path(storage_path)
        try:
            data = self.storage.read(archive_path)
        except StorageKeyNotFound:
            logger.debug(f"No archive found at {archive_path}.")
            return False
        except IOFailure as e:
            logger.error(f"Could not unarchive from {storage_path}: {e}")
            return False

        target_root = path_join(get_absolute_path(directory), "")
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as zip_file:
                for info in zip_file.infolist():
                    if info.is_dir():
                        continue
                    target = get_absolute_path(path_join(target_root, info.filename))
                    if not target.startswith(target_root):
                        raise ArchiveCorrupt(
                            f"Archive {archive_path} has an entry outside of the target directory: {info.filename}"
                        )
                    write_binary_file_atomically(target, zip_file.read(info))
        except (zipfile.BadZipFile, zlib.error, EOFError) as e:
            raise ArchiveCorrupt(f"Could not extract archive {archive_path}") from e
        return True
