# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

import logging

from packaging.version import InvalidVersion, Version

from dd_license_notice.model.identifier import PackageIdentifier
from dd_license_notice.model.provenance import Provenance
from dd_license_notice.model.scan_result import ScanResult
from dd_license_notice.scanner.scan_engine import ScanEngine
from dd_license_notice.scanner.scanner_criteria import ScannerCriteria
from dd_license_notice.scanner.storages.abstract_scan_results_storage import (
    ScanResultsStorage,
)
from dd_license_notice.storage.file_storage import IOFailure

# Get application-specific logger
logger = logging.getLogger("dd_license_notice")


def _scanner_version(result: ScanResult) -> Version:
    # unparsable versions sort below every release
    try:
        return Version(result.scanner.version)
    except InvalidVersion:
        return Version("0")


class ScanResultCache:
    """Reuse scan results keyed by package identifier and provenance."""

    def __init__(self, storage: ScanResultsStorage) -> None:
        self.storage = storage

    def read(
        self,
        package_id: PackageIdentifier,
        provenance: Provenance,
        criteria: ScannerCriteria | None = None,
    ) -> list[ScanResult]:
        """Return the matching results, most recent first.

        Raises:
            IOFailure: If the storage could not be read
        """
        results = self.storage.read(package_id, provenance, criteria)
        return sorted(
            results,
            key=lambda result: (result.end_time, _scanner_version(result)),
            reverse=True,
        )

    def add(self, package_id: PackageIdentifier, scan_result: ScanResult) -> None:
        self.storage.add(package_id, scan_result)

    def scan_and_add(
        self,
        package_id: PackageIdentifier,
        provenance: Provenance,
        source_dir: str,
        engine: ScanEngine,
    ) -> ScanResult:
        """Scan source_dir and store the result.

        A result that cannot be stored is still returned.

        Raises:
            ScanEngineFailure: If the scan failed
        """
        scan_result = engine.scan(source_dir, package_id, provenance)
        try:
            self.add(package_id, scan_result)
        except IOFailure as e:
            logger.warning(
                f"Scan result for {package_id.to_coordinates()} could not be stored in {self.storage.name}: {e}"
            )
        return scan_result

    def scan_or_read(
        self,
        package_id: PackageIdentifier,
        provenance: Provenance,
        source_dir: str,
        engine: ScanEngine,
        criteria: ScannerCriteria | None = None,
    ) -> ScanResult:
        """Return the most recent stored result compatible with engine, scanning only when there is none."""
        if criteria is None:
            criteria = ScannerCriteria.for_details(engine.details)
        try:
            cached = self.read(package_id, provenance, criteria)
        except IOFailure as e:
            logger.warning(
                f"Could not read cached scan results for {package_id.to_coordinates()}: {e}"
            )
            cached = []
        if cached:
            logger.info(f"Reusing cached scan result for {package_id.to_coordinates()}.")
            return cached[0]
        return self.scan_and_add(package_id, provenance, source_dir, engine)
