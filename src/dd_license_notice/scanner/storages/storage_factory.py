# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

import logging

from dd_license_notice.config.cli_configs import default_config
from dd_license_notice.config.storage_config import ScannerConfig
from dd_license_notice.scanner.storages.abstract_scan_results_storage import (
    ScanResultsStorage,
)
from dd_license_notice.scanner.storages.database_storage import DatabaseStorage
from dd_license_notice.scanner.storages.file_based_storage import FileBasedStorage
from dd_license_notice.storage.local_file_storage import LocalFileStorage
from dd_license_notice.storage.storage_factory import create_file_storage

# Get application-specific logger
logger = logging.getLogger("dd_license_notice")


def create_scan_results_storage(config: ScannerConfig) -> ScanResultsStorage:
    if config.database_storage is not None:
        storage: ScanResultsStorage = DatabaseStorage.from_url(
            config.database_storage.url
        )
    elif config.file_based_storage is not None:
        storage = FileBasedStorage(create_file_storage(config.file_based_storage.backend))
    else:
        storage = FileBasedStorage(
            LocalFileStorage(default_config.preset_scan_results_dir)
        )
    logger.debug(f"Using {storage.name} for scan results.")
    return storage
