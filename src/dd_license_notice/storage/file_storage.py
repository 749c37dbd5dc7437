# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

from abc import ABC, abstractmethod


class StorageKeyNotFound(Exception):
    """Exception raised when a storage holds no object for the requested path."""

    pass


class IOFailure(Exception):
    """Exception raised when a storage backend cannot be read from or written to."""

    pass


class FileStorage(ABC):
    """A minimal byte storage addressed by slash separated relative paths."""

    @abstractmethod
    def read(self, path: str) -> bytes:
        """Return the bytes stored at path.

        Raises:
            StorageKeyNotFound: If nothing is stored at path
            IOFailure: If the backend could not be read
        """
        raise NotImplementedError

    @abstractmethod
    def write(self, path: str, data: bytes) -> None:
        """Store data at path, replacing what was there. Readers never see partial data.

        Raises:
            IOFailure: If the backend could not be written
        """
        raise NotImplementedError
