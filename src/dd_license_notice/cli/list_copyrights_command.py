# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

# Command for listing where the copyrights of a scanned package were found

from typing import Annotated, Optional

import typer

from dd_license_notice.cli.common import (
    create_scan_result_cache,
    load_scan_record,
    load_scanner_config,
)
from dd_license_notice.model.identifier import MalformedIdentifier, PackageIdentifier
from dd_license_notice.storage.file_storage import IOFailure


def list_copyrights(
    scan_record_file: Annotated[
        str,
        typer.Argument(help="Path to the scan record written by the scan command."),
    ],
    package_id: Annotated[
        str,
        typer.Option(
            "--package-id",
            help="Identifier of the package, e.g. npm:@nestjs:platform-express:6.2.3",
        ),
    ],
    license_id: Annotated[
        Optional[str],
        typer.Option(
            "--license-id",
            help="Only list the copyrights associated with this license.",
        ),
    ] = None,
    config_file: Annotated[
        Optional[str],
        typer.Option(
            "--config",
            help="Path to a JSON file configuring the scan results storage.",
        ),
    ] = None,
) -> None:
    """
    List the copyright statements found for a package with the locations they were found at.
    """
    try:
        identifier = PackageIdentifier.from_coordinates(package_id)
    except MalformedIdentifier as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    scan_record = load_scan_record(scan_record_file)
    if identifier not in scan_record.graph.packages:
        typer.echo(
            f"Error: Could not find a package for the given id `{package_id}`.",
            err=True,
        )
        raise typer.Exit(code=2)

    provenance = scan_record.provenances.get(identifier)
    if provenance is None:
        typer.echo(f"Error: Package `{package_id}` was not scanned.", err=True)
        raise typer.Exit(code=1)

    scan_result_cache = create_scan_result_cache(load_scanner_config(config_file))
    try:
        scan_results = scan_result_cache.read(identifier, provenance)
    except IOFailure as e:
        typer.echo(f"Error: Could not read the scan results: {e}", err=True)
        raise typer.Exit(code=1)
    if not scan_results:
        typer.echo(f"Error: No scan result found for `{package_id}`.", err=True)
        raise typer.Exit(code=1)

    for finding in scan_results[0].license_findings:
        if license_id is not None and finding.license != license_id:
            continue
        typer.echo(f"--- {finding.license} ---")
        typer.echo("")
        for copyright in finding.copyrights:
            typer.echo(f"{copyright.statement}:")
            for location in copyright.locations:
                typer.echo(f"  {location}")
        typer.echo("")
