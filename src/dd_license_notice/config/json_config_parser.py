# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2024-present Datadog, Inc.

import json
import logging
from typing import Any

from dd_license_notice.adaptors.os import open_file
from dd_license_notice.config.storage_config import (
    DatabaseStorageConfig,
    FileArchiverConfig,
    FileBasedStorageConfig,
    FileStorageConfig,
    HttpFileStorageConfig,
    LocalFileStorageConfig,
    ScannerConfig,
)
from dd_license_notice.model.copyright_garbage import CopyrightGarbage

# Get application-specific logger
logger = logging.getLogger("dd_license_notice")


class JsonConfigParser:
    """Parser for JSON configuration files used by dd-license-notice."""

    @staticmethod
    def parse_file_storage(storage_dict: dict[str, Any]) -> FileStorageConfig:
        """Parse a file storage from JSON format.

        JSON format: {"local_file_storage": {"directory": "~/archive"}}
                  or {"http_file_storage": {"url": "https://...", "headers": {...}}}

        Raises:
            StorageConfigurationError: If not exactly one storage is configured
            ValueError: If a storage misses a required field
        """
        local_file_storage = None
        http_file_storage = None
        local_dict = storage_dict.get("local_file_storage")
        if local_dict is not None:
            if "directory" not in local_dict:
                raise ValueError("Local file storage requires a 'directory'.")
            local_file_storage = LocalFileStorageConfig(
                directory=local_dict["directory"]
            )
        http_dict = storage_dict.get("http_file_storage")
        if http_dict is not None:
            if "url" not in http_dict:
                raise ValueError("HTTP file storage requires an 'url'.")
            http_file_storage = HttpFileStorageConfig(
                url=http_dict["url"],
                headers=http_dict.get("headers", {}),
                timeout=int(http_dict.get("timeout", 60)),
            )
        return FileStorageConfig(
            local_file_storage=local_file_storage,
            http_file_storage=http_file_storage,
        )

    @staticmethod
    def parse_scanner_config(config_dict: dict[str, Any]) -> ScannerConfig:
        """Parse the "scanner" section of a configuration file.

        Missing sections fall back to the defaults: license file patterns
        archived to the local archive directory, scan results kept in the
        local scan results directory.
        """
        archive = FileArchiverConfig()
        archive_dict = config_dict.get("archive")
        if archive_dict is not None:
            archive = FileArchiverConfig(
                patterns=archive_dict.get("patterns", archive.patterns),
                storage=(
                    JsonConfigParser.parse_file_storage(archive_dict["storage"])
                    if "storage" in archive_dict
                    else archive.storage
                ),
            )

        file_based_storage = None
        file_based_dict = config_dict.get("file_based_storage")
        if file_based_dict is not None:
            file_based_storage = FileBasedStorageConfig(
                backend=JsonConfigParser.parse_file_storage(
                    file_based_dict.get("backend", {})
                )
            )

        database_storage = None
        database_dict = config_dict.get("database_storage")
        if database_dict is not None:
            if "url" not in database_dict:
                raise ValueError("Database storage requires an 'url'.")
            database_storage = DatabaseStorageConfig(url=database_dict["url"])

        return ScannerConfig(
            archive=archive,
            file_based_storage=file_based_storage,
            database_storage=database_storage,
        )

    @staticmethod
    def load_scanner_config(config_file_path: str) -> ScannerConfig:
        """Load the scanner configuration from a JSON file.

        Args:
            config_file_path: Path to the JSON file with a top level "scanner" object

        Returns:
            The parsed ScannerConfig

        Raises:
            FileNotFoundError: If the configuration file is not found
            json.JSONDecodeError: If the JSON file is invalid
            ValueError: If the configuration format is invalid
        """
        try:
            config_json = json.loads(open_file(config_file_path))
            return JsonConfigParser.parse_scanner_config(config_json.get("scanner", {}))
        except FileNotFoundError:
            logger.error(f"Configuration file not found: {config_file_path}")
            raise
        except json.JSONDecodeError:
            logger.error(f"Invalid JSON in configuration file: {config_file_path}")
            raise
        except Exception as e:
            logger.error(f"Failed to load scanner configuration: {str(e)}")
            raise

    @staticmethod
    def load_copyright_garbage(garbage_file_path: str) -> CopyrightGarbage:
        """Load known bogus copyright statements from a JSON file.

        JSON format: {"items": ["Copyright (c) <year> <owner>", ...]} or a plain list.
        """
        try:
            garbage_json = json.loads(open_file(garbage_file_path))
            items = (
                garbage_json.get("items", [])
                if isinstance(garbage_json, dict)
                else garbage_json
            )
            if not isinstance(items, list) or not all(
                isinstance(item, str) for item in items
            ):
                raise ValueError("Copyright garbage must be a list of strings.")
            return CopyrightGarbage(items=frozenset(items))
        except FileNotFoundError:
            logger.error(f"Copyright garbage file not found: {garbage_file_path}")
            raise
        except json.JSONDecodeError:
            logger.error(f"Invalid JSON in copyright garbage file: {garbage_file_path}")
            raise
        except Exception as e:
            logger.error(f"Error reading copyright garbage file: {e}")
            raise
