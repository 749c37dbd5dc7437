# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

from dd_license_notice.config.storage_config import (
    FileArchiverConfig,
    FileStorageConfig,
)
from dd_license_notice.storage.file_archiver import FileArchiver
from dd_license_notice.storage.file_storage import FileStorage
from dd_license_notice.storage.http_file_storage import HttpFileStorage
from dd_license_notice.storage.local_file_storage import LocalFileStorage


def create_file_storage(config: FileStorageConfig) -> FileStorage:
    if config.local_file_storage is not None:
        return LocalFileStorage(config.local_file_storage.directory)
    if config.http_file_storage is not None:
        return HttpFileStorage(
            url=config.http_file_storage.url,
            headers=config.http_file_storage.headers,
            timeout=config.http_file_storage.timeout,
        )
    raise ValueError("No file storage configured.")


def create_file_archiver(config: FileArchiverConfig) -> FileArchiver:
    return FileArchiver(config.patterns, create_file_storage(config.storage))
