# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

import logging
import tempfile
from concurrent.futures import ThreadPoolExecutor

from dd_license_notice.artifact_management.source_code_downloader import (
    DownloadError,
    SourceCodeDownloader,
)
from dd_license_notice.config.cli_configs import default_config
from dd_license_notice.model.dependency_graph import DependencyGraph, Package
from dd_license_notice.model.provenance import Provenance
from dd_license_notice.model.scan_record import ScanRecord
from dd_license_notice.scanner.scan_engine import ScanEngine, ScanEngineFailure
from dd_license_notice.scanner.scan_result_cache import ScanResultCache
from dd_license_notice.scanner.scanner_criteria import ScannerCriteria
from dd_license_notice.storage.file_archiver import (
    FileArchiver,
    get_archive_storage_path,
)
from dd_license_notice.storage.file_storage import IOFailure

# Get application-specific logger
logger = logging.getLogger("dd_license_notice")


class Scanner:
    """Scan every dependency of a graph, reusing cached results where possible.

    Fresh scans also archive the license files of the scanned tree so the
    notice can later quote them without fetching the code again.
    """

    def __init__(
        self,
        scan_result_cache: ScanResultCache,
        engine: ScanEngine,
        file_archiver: FileArchiver,
        downloader: SourceCodeDownloader,
        criteria: ScannerCriteria | None = None,
        max_workers: int = default_config.preset_max_workers,
        download_dir: str | None = None,
    ) -> None:
        self.scan_result_cache = scan_result_cache
        self.engine = engine
        self.file_archiver = file_archiver
        self.downloader = downloader
        # results of an older patch release of the same scanner are reused
        self.criteria = criteria or ScannerCriteria.for_details(engine.details)
        self.max_workers = max(1, max_workers)
        self.download_dir = download_dir

    def scan_graph(self, graph: DependencyGraph) -> ScanRecord:
        packages = graph.dependencies()
        logger.info(
            f"Scanning {len(packages)} package(s) with {self.engine.details.name} {self.engine.details.version}."
        )
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            outcomes = list(executor.map(self.scan_package, packages))

        scan_record = ScanRecord(graph=graph)
        for package, (provenance, failure) in zip(packages, outcomes):
            if provenance is not None:
                scan_record.provenances[package.id] = provenance
            if failure is not None:
                scan_record.failures[package.id] = failure
        logger.info(
            f"Scanned {len(scan_record.provenances)} package(s), {len(scan_record.failures)} failed."
        )
        return scan_record

    def scan_package(self, package: Package) -> tuple[Provenance | None, str | None]:
        """Make sure a scan result for package is cached.

        A failure of one package never aborts the scan of the others.

        Returns:
            The provenance the result is stored under, or a failure message
        """
        coordinates = package.id.to_coordinates()
        try:
            return self._scan_package(package)
        except (OSError, IOFailure, ValueError) as e:
            logger.error(f"Could not scan {coordinates}: {e}")
            return None, str(e)
        except Exception as e:
            logger.exception(f"Unexpected error while scanning {coordinates}")
            return None, f"Unexpected error: {e}"

    def _scan_package(self, package: Package) -> tuple[Provenance | None, str | None]:
        coordinates = package.id.to_coordinates()
        try:
            provenance = self.downloader.resolve_provenance(package)
        except DownloadError as e:
            logger.error(f"Could not resolve the source of {coordinates}: {e}")
            return None, str(e)

        try:
            cached = self.scan_result_cache.read(package.id, provenance, self.criteria)
        except IOFailure as e:
            logger.warning(f"Could not read cached scan results for {coordinates}: {e}")
            cached = []
        if cached:
            logger.info(f"Found cached scan result for {coordinates}.")
            return provenance, None

        with tempfile.TemporaryDirectory(
            prefix="dd-license-notice-", dir=self.download_dir
        ) as scratch_dir:
            try:
                source_dir = self.downloader.download(package, provenance, scratch_dir)
                self.scan_result_cache.scan_and_add(
                    package.id, provenance, source_dir, self.engine
                )
            except (DownloadError, ScanEngineFailure) as e:
                logger.error(f"Could not scan {coordinates}: {e}")
                return None, str(e)
            try:
                self.file_archiver.archive(
                    source_dir, get_archive_storage_path(package.id, provenance)
                )
            except IOFailure as e:
                logger.error(f"Could not archive the license files of {coordinates}: {e}")
        return provenance, None
