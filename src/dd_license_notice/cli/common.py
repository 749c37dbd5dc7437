# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

# Loading helpers shared by the commands

import json

import typer

from dd_license_notice.adaptors.os import open_file
from dd_license_notice.config.json_config_parser import JsonConfigParser
from dd_license_notice.config.storage_config import ScannerConfig
from dd_license_notice.model.scan_record import ScanRecord
from dd_license_notice.scanner.scan_result_cache import ScanResultCache
from dd_license_notice.scanner.storages.storage_factory import (
    create_scan_results_storage,
)
from dd_license_notice.storage.file_storage import IOFailure


def load_scanner_config(config_file: str | None) -> ScannerConfig:
    if config_file is None:
        return ScannerConfig()
    try:
        return JsonConfigParser.load_scanner_config(config_file)
    except FileNotFoundError:
        typer.echo(f"Error: Configuration file '{config_file}' not found.", err=True)
        raise typer.Exit(code=1)
    except ValueError as e:
        typer.echo(f"Error: Invalid configuration in '{config_file}': {e}", err=True)
        raise typer.Exit(code=2)


def load_scan_record(scan_record_file: str) -> ScanRecord:
    try:
        return ScanRecord.from_dict(json.loads(open_file(scan_record_file)))
    except FileNotFoundError:
        typer.echo(f"Error: File '{scan_record_file}' not found.", err=True)
        raise typer.Exit(code=1)
    except (ValueError, KeyError, TypeError) as e:
        typer.echo(f"Error: Invalid scan record '{scan_record_file}': {e}", err=True)
        raise typer.Exit(code=1)


def create_scan_result_cache(scanner_config: ScannerConfig) -> ScanResultCache:
    try:
        return ScanResultCache(create_scan_results_storage(scanner_config))
    except IOFailure as e:
        typer.echo(f"Error: Could not open the scan results storage: {e}", err=True)
        raise typer.Exit(code=1)
