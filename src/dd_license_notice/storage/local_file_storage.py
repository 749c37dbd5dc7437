# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

import logging

from dd_license_notice.adaptors.os import (
    create_dirs,
    expand_user_path,
    get_absolute_path,
    is_file,
    path_join,
    read_binary_file,
    write_binary_file_atomically,
)
from dd_license_notice.storage.file_storage import (
    FileStorage,
    IOFailure,
    StorageKeyNotFound,
)

# Get application-specific logger
logger = logging.getLogger("dd_license_notice")


class LocalFileStorage(FileStorage):
    """Stores each path as a file below a local directory."""

    def __init__(self, directory: str) -> None:
        self.directory = get_absolute_path(expand_user_path(directory))
        create_dirs(self.directory)

    def _file_path(self, path: str) -> str:
        file_path = get_absolute_path(path_join(self.directory, path))
        if not file_path.startswith(path_join(self.directory, "")):
            raise ValueError(
                f"Path '{path}' points outside of the storage directory {self.directory}"
            )
        return file_path

    def read(self, path: str) -> bytes:
        file_path = self._file_path(path)
        if not is_file(file_path):
            raise StorageKeyNotFound(f"No file stored at '{path}' in {self.directory}")
        try:
            return read_binary_file(file_path)
        except OSError as e:
            raise IOFailure(f"Could not read '{path}' from {self.directory}") from e

    def write(self, path: str, data: bytes) -> None:
        file_path = self._file_path(path)
        logger.debug(f"Writing {len(data)} bytes to {file_path}")
        try:
            write_binary_file_atomically(file_path, data)
        except OSError as e:
            raise IOFailure(f"Could not write '{path}' to {self.directory}") from e
