# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

from dataclasses import dataclass, field

from dd_license_notice.config.cli_configs import default_config


class StorageConfigurationError(ValueError):
    """Exception raised when storages are configured ambiguously or not at all."""

    pass


@dataclass
class LocalFileStorageConfig:
    directory: str


@dataclass
class HttpFileStorageConfig:
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    timeout: int = 60  # seconds


@dataclass
class FileStorageConfig:
    """Exactly one byte storage backend: a local directory or an HTTP blob store."""

    local_file_storage: LocalFileStorageConfig | None = None
    http_file_storage: HttpFileStorageConfig | None = None

    def __post_init__(self) -> None:
        configured = [
            backend
            for backend in (self.local_file_storage, self.http_file_storage)
            if backend is not None
        ]
        if len(configured) != 1:
            raise StorageConfigurationError(
                f"Exactly one file storage must be configured, found {len(configured)}."
            )


@dataclass
class FileArchiverConfig:
    patterns: list[str] = field(
        default_factory=lambda: list(default_config.preset_license_file_patterns)
    )
    storage: FileStorageConfig = field(
        default_factory=lambda: FileStorageConfig(
            local_file_storage=LocalFileStorageConfig(
                directory=default_config.preset_archive_dir
            )
        )
    )


@dataclass
class FileBasedStorageConfig:
    backend: FileStorageConfig


@dataclass
class DatabaseStorageConfig:
    url: str  # SQLAlchemy database URL, e.g. postgresql://user@host/db


@dataclass
class ScannerConfig:
    archive: FileArchiverConfig = field(default_factory=FileArchiverConfig)
    file_based_storage: FileBasedStorageConfig | None = None
    database_storage: DatabaseStorageConfig | None = None

    def __post_init__(self) -> None:
        configured = [
            storage
            for storage in (self.file_based_storage, self.database_storage)
            if storage is not None
        ]
        if len(configured) > 1:
            raise StorageConfigurationError(
                "Only one scan results storage may be configured."
            )
