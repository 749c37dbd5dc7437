# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

# Main entry point for the dd-license-notice CLI tool

from typing import Annotated

import typer

from dd_license_notice.cli.generate_notice_command import generate_notice
from dd_license_notice.cli.list_copyrights_command import list_copyrights
from dd_license_notice.cli.scan_command import scan
from dd_license_notice.utils.logging import log_level_from_flags, setup_logging

app = typer.Typer(add_completion=False)
app.command()(scan)
app.command()(generate_notice)
app.command()(list_copyrights)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Log progress information.")
    ] = False,
    debug: Annotated[
        bool, typer.Option("--debug", help="Log debugging information.")
    ] = False,
) -> None:
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        ctx.exit(2)
    setup_logging(log_level_from_flags(verbose, debug))


if __name__ == "__main__":
    app()
