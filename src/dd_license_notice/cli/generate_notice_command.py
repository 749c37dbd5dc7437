# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

# Command for rendering the notice of a scanned project

import json
from typing import Annotated, Optional

import typer

from dd_license_notice.adaptors.os import write_file
from dd_license_notice.cli.common import (
    create_scan_result_cache,
    load_scan_record,
    load_scanner_config,
)
from dd_license_notice.config.cli_configs import default_config
from dd_license_notice.config.json_config_parser import JsonConfigParser
from dd_license_notice.model.copyright_garbage import CopyrightGarbage
from dd_license_notice.report_generator.license_text_provider import (
    DirectoryLicenseTextProvider,
)
from dd_license_notice.report_generator.report_generator import ReportGenerator
from dd_license_notice.report_generator.writters.notice_by_package_writter import (  # noqa: E501
    NoticeByPackageWritter,
)
from dd_license_notice.storage.storage_factory import create_file_archiver


def generate_notice(
    scan_record_file: Annotated[
        str,
        typer.Argument(help="Path to the scan record written by the scan command."),
    ],
    output_file: Annotated[
        str,
        typer.Option("--output", "-o", help="Path to the notice file to write."),
    ] = default_config.preset_notice_file_name,
    config_file: Annotated[
        Optional[str],
        typer.Option(
            "--config",
            help="Path to a JSON file configuring the scan results storage and the archive.",
        ),
    ] = None,
    copyright_garbage_file: Annotated[
        Optional[str],
        typer.Option(
            "--copyright-garbage",
            help="Path to a JSON file listing copyright statements to leave out of the notice.",
        ),
    ] = None,
    license_texts_dirs: Annotated[
        Optional[list[str]],
        typer.Option(
            "--license-texts-dir",
            help=(
                "Directory with one file per license id holding the license text. "
                "Can be repeated, the first directory with a text wins."
            ),
        ),
    ] = None,
    max_workers: Annotated[
        int,
        typer.Option(
            "--max-workers",
            min=1,
            help="Number of package sections rendered in parallel.",
        ),
    ] = default_config.preset_max_workers,
) -> None:
    """
    Generate a notice listing, per package, its license files, licenses and copyright holders.
    """
    scan_record = load_scan_record(scan_record_file)
    scanner_config = load_scanner_config(config_file)

    copyright_garbage = CopyrightGarbage()
    if copyright_garbage_file is not None:
        try:
            copyright_garbage = JsonConfigParser.load_copyright_garbage(
                copyright_garbage_file
            )
        except FileNotFoundError:
            typer.echo(
                f"Error: File '{copyright_garbage_file}' not found.", err=True
            )
            raise typer.Exit(code=1)
        except (json.JSONDecodeError, ValueError) as e:
            typer.echo(f"Error: Invalid copyright garbage file: {e}", err=True)
            raise typer.Exit(code=1)

    writer = NoticeByPackageWritter(
        scan_result_cache=create_scan_result_cache(scanner_config),
        file_archiver=create_file_archiver(scanner_config.archive),
        license_text_provider=DirectoryLicenseTextProvider(
            license_texts_dirs or [default_config.preset_license_texts_dir]
        ),
        copyright_garbage=copyright_garbage,
        license_file_patterns=scanner_config.archive.patterns,
        max_workers=max_workers,
    )
    notice = ReportGenerator(writer).generate_report(scan_record)
    write_file(output_file, notice)
    typer.echo(f"Notice written to {output_file}.")
