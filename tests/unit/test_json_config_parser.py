# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

import json
from unittest.mock import Mock, patch

import pytest

from dd_license_notice.config.cli_configs import default_config
from dd_license_notice.config.json_config_parser import JsonConfigParser
from dd_license_notice.config.storage_config import (
    DatabaseStorageConfig,
    HttpFileStorageConfig,
    LocalFileStorageConfig,
    StorageConfigurationError,
)


class TestJsonConfigParser:
    def test_parse_local_file_storage(self) -> None:
        """Test parsing a local directory storage."""
        result = JsonConfigParser.parse_file_storage(
            {"local_file_storage": {"directory": "/tmp/archive"}}
        )

        assert result.local_file_storage == LocalFileStorageConfig("/tmp/archive")
        assert result.http_file_storage is None

    def test_parse_http_file_storage(self) -> None:
        """Test parsing an HTTP blob storage with headers."""
        result = JsonConfigParser.parse_file_storage(
            {
                "http_file_storage": {
                    "url": "https://storage.example.com",
                    "headers": {"Authorization": "Bearer token"},
                    "timeout": 10,
                }
            }
        )

        assert result.http_file_storage == HttpFileStorageConfig(
            url="https://storage.example.com",
            headers={"Authorization": "Bearer token"},
            timeout=10,
        )

    def test_parse_file_storage_requires_exactly_one_backend(self) -> None:
        """Test that zero or two storages are a configuration error."""
        with pytest.raises(StorageConfigurationError):
            JsonConfigParser.parse_file_storage({})
        with pytest.raises(StorageConfigurationError):
            JsonConfigParser.parse_file_storage(
                {
                    "local_file_storage": {"directory": "/tmp"},
                    "http_file_storage": {"url": "https://storage.example.com"},
                }
            )

    def test_parse_file_storage_missing_directory(self) -> None:
        with pytest.raises(ValueError, match="requires a 'directory'"):
            JsonConfigParser.parse_file_storage({"local_file_storage": {}})

    def test_parse_scanner_config_defaults(self) -> None:
        """Test that an empty scanner section falls back to the defaults."""
        result = JsonConfigParser.parse_scanner_config({})

        assert result.archive.patterns == default_config.preset_license_file_patterns
        assert result.archive.storage.local_file_storage == LocalFileStorageConfig(
            default_config.preset_archive_dir
        )
        assert result.file_based_storage is None
        assert result.database_storage is None

    def test_parse_scanner_config_with_database_storage(self) -> None:
        result = JsonConfigParser.parse_scanner_config(
            {
                "archive": {
                    "patterns": ["LICENSE"],
                    "storage": {"local_file_storage": {"directory": "/tmp/a"}},
                },
                "database_storage": {"url": "sqlite:///scan-results.db"},
            }
        )

        assert result.archive.patterns == ["LICENSE"]
        assert result.archive.storage.local_file_storage == LocalFileStorageConfig(
            "/tmp/a"
        )
        assert result.database_storage == DatabaseStorageConfig(
            "sqlite:///scan-results.db"
        )

    def test_parse_scanner_config_rejects_two_scan_results_storages(self) -> None:
        """Test that configuring more than one scan results storage fails."""
        with pytest.raises(StorageConfigurationError):
            JsonConfigParser.parse_scanner_config(
                {
                    "file_based_storage": {
                        "backend": {"local_file_storage": {"directory": "/tmp"}}
                    },
                    "database_storage": {"url": "sqlite://"},
                }
            )

    @patch("dd_license_notice.config.json_config_parser.open_file")
    def test_load_scanner_config(self, mock_open_file: Mock) -> None:
        """Test loading the scanner section of a configuration file."""
        mock_open_file.return_value = json.dumps(
            {
                "scanner": {
                    "file_based_storage": {
                        "backend": {
                            "http_file_storage": {"url": "https://storage.example.com"}
                        }
                    }
                }
            }
        )

        result = JsonConfigParser.load_scanner_config("config.json")

        assert result.file_based_storage is not None
        assert result.file_based_storage.backend.http_file_storage == (
            HttpFileStorageConfig(url="https://storage.example.com")
        )
        mock_open_file.assert_called_once_with("config.json")

    @patch("dd_license_notice.config.json_config_parser.open_file")
    def test_load_scanner_config_file_not_found(self, mock_open_file: Mock) -> None:
        mock_open_file.side_effect = FileNotFoundError("File not found")

        with pytest.raises(FileNotFoundError):
            JsonConfigParser.load_scanner_config("nonexistent.json")

    @patch("dd_license_notice.config.json_config_parser.open_file")
    def test_load_scanner_config_invalid_json(self, mock_open_file: Mock) -> None:
        mock_open_file.return_value = "invalid json"

        with pytest.raises(json.JSONDecodeError):
            JsonConfigParser.load_scanner_config("invalid.json")

    @patch("dd_license_notice.config.json_config_parser.open_file")
    def test_load_copyright_garbage(self, mock_open_file: Mock) -> None:
        """Test loading garbage statements from both supported formats."""
        mock_open_file.return_value = json.dumps({"items": ["Copyright (c) <year>"]})
        garbage = JsonConfigParser.load_copyright_garbage("garbage.json")
        assert "Copyright (c) <year>" in garbage

        mock_open_file.return_value = json.dumps(["(c) Foo", "Copyright Bar"])
        garbage = JsonConfigParser.load_copyright_garbage("garbage.json")
        assert garbage.items == frozenset({"(c) Foo", "Copyright Bar"})

    @patch("dd_license_notice.config.json_config_parser.open_file")
    def test_load_copyright_garbage_rejects_non_strings(
        self, mock_open_file: Mock
    ) -> None:
        mock_open_file.return_value = json.dumps({"items": [1, 2]})

        with pytest.raises(ValueError, match="list of strings"):
            JsonConfigParser.load_copyright_garbage("garbage.json")
