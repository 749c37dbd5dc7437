# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

import logging

import requests

from dd_license_notice.storage.file_storage import (
    FileStorage,
    IOFailure,
    StorageKeyNotFound,
)

# Get application-specific logger
logger = logging.getLogger("dd_license_notice")


class HttpFileStorage(FileStorage):
    """Stores each path as an object of a remote blob store speaking plain GET/PUT."""

    def __init__(
        self, url: str, headers: dict[str, str] | None = None, timeout: int = 60
    ) -> None:
        self.url = url.rstrip("/")
        self.headers = headers or {}
        self.timeout = timeout

    def _object_url(self, path: str) -> str:
        return f"{self.url}/{path.lstrip('/')}"

    def read(self, path: str) -> bytes:
        url = self._object_url(path)
        try:
            response = requests.get(url, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise IOFailure(f"Could not read {url}: {e}") from e
        if response.status_code == 404:
            raise StorageKeyNotFound(f"No object stored at {url}")
        if not response.ok:
            raise IOFailure(
                f"Could not read {url}, the server returned {response.status_code}"
            )
        return response.content

    def write(self, path: str, data: bytes) -> None:
        url = self._object_url(path)
        logger.debug(f"Uploading {len(data)} bytes to {url}")
        try:
            response = requests.put(
                url, data=data, headers=self.headers, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise IOFailure(f"Could not write {url}: {e}") from e
        if not response.ok:
            raise IOFailure(
                f"Could not write {url}, the server returned {response.status_code}"
            )
