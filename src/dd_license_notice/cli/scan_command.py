# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

# Command for scanning the dependencies of a project into the scan results cache

import json
import logging
from typing import Annotated, Optional

import typer

from dd_license_notice.adaptors.os import create_dirs, open_file, write_file
from dd_license_notice.artifact_management.source_code_downloader import (
    SourceCodeDownloader,
)
from dd_license_notice.cli.common import create_scan_result_cache, load_scanner_config
from dd_license_notice.config.cli_configs import default_config
from dd_license_notice.model.dependency_graph import DependencyGraph
from dd_license_notice.scanner.scan_code_engine import ScanCodeEngine
from dd_license_notice.scanner.scanner import Scanner
from dd_license_notice.storage.storage_factory import create_file_archiver

# Get application-specific logger
logger = logging.getLogger("dd_license_notice")


def scan(
    graph_file: Annotated[
        str,
        typer.Argument(
            help="Path to the JSON dependency graph of the project to scan."
        ),
    ],
    output_file: Annotated[
        str,
        typer.Option(
            "--output",
            "-o",
            help="Path to the scan record to write, it is the input of generate-notice.",
        ),
    ] = "scan-record.json",
    config_file: Annotated[
        Optional[str],
        typer.Option(
            "--config",
            help="Path to a JSON file configuring the scan results storage and the archive.",
        ),
    ] = None,
    download_dir: Annotated[
        Optional[str],
        typer.Option(
            "--download-dir",
            help="Directory where the per package scratch directories are created, defaults to the system temporary directory.",
        ),
    ] = None,
    max_workers: Annotated[
        int,
        typer.Option(
            "--max-workers",
            min=1,
            help="Number of packages scanned in parallel.",
        ),
    ] = default_config.preset_max_workers,
) -> None:
    """
    Scan the source code of every dependency of a project.

    Results are stored in the scan results cache keyed by package and source provenance,
    packages already scanned with a compatible scanner are not scanned again.
    """
    try:
        graph = DependencyGraph.from_dict(json.loads(open_file(graph_file)))
    except FileNotFoundError:
        typer.echo(f"Error: File '{graph_file}' not found.", err=True)
        raise typer.Exit(code=1)
    except (ValueError, KeyError, TypeError) as e:
        typer.echo(f"Error: Invalid dependency graph '{graph_file}': {e}", err=True)
        raise typer.Exit(code=1)

    scanner_config = load_scanner_config(config_file)
    if download_dir is not None:
        create_dirs(download_dir)
    scanner = Scanner(
        scan_result_cache=create_scan_result_cache(scanner_config),
        engine=ScanCodeEngine(),
        file_archiver=create_file_archiver(scanner_config.archive),
        downloader=SourceCodeDownloader(),
        max_workers=max_workers,
        download_dir=download_dir,
    )
    scan_record = scanner.scan_graph(graph)
    write_file(output_file, json.dumps(scan_record.to_dict(), indent=2) + "\n")

    typer.echo(
        f"Scanned {len(scan_record.provenances)} package(s), "
        f"{len(scan_record.failures)} failed. Scan record written to {output_file}."
    )
    for package_id, failure in sorted(scan_record.failures.items()):
        typer.echo(f"  {package_id.to_coordinates()}: {failure}", err=True)
    if scan_record.failures and not scan_record.provenances:
        raise typer.Exit(code=1)
