# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

from dd_license_notice.storage.file_archiver import (
    ArchiveCorrupt,
    FileArchiver,
    get_archive_storage_path,
)
from dd_license_notice.storage.file_storage import (
    FileStorage,
    IOFailure,
    StorageKeyNotFound,
)

__all__ = [
    "ArchiveCorrupt",
    "FileArchiver",
    "FileStorage",
    "IOFailure",
    "StorageKeyNotFound",
    "get_archive_storage_path",
]
