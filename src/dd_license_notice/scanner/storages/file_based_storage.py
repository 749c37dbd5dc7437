# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

import json
import logging
import threading

from dd_license_notice.model.identifier import PackageIdentifier
from dd_license_notice.model.provenance import Provenance
from dd_license_notice.model.scan_result import ScanResult
from dd_license_notice.scanner.scanner_criteria import ScannerCriteria
from dd_license_notice.scanner.storages.abstract_scan_results_storage import (
    ScanResultsStorage,
)
from dd_license_notice.storage.file_storage import (
    FileStorage,
    IOFailure,
    StorageKeyNotFound,
)

# Get application-specific logger
logger = logging.getLogger("dd_license_notice")

SCAN_RESULTS_FILE_NAME = "scan_results.json"
# writers of the same results file share a lock, distinct files rarely do
LOCK_STRIPES = 64


class FileBasedStorage(ScanResultsStorage):
    """Keep all results for one package and provenance in a single JSON file of a FileStorage."""

    def __init__(self, backend: FileStorage) -> None:
        self.backend = backend
        self._locks = [threading.Lock() for _ in range(LOCK_STRIPES)]

    @property
    def name(self) -> str:
        return f"{type(self).__name__}({type(self.backend).__name__})"

    @staticmethod
    def get_results_path(package_id: PackageIdentifier, provenance: Provenance) -> str:
        return f"{package_id.to_path()}/{provenance.storage_hash()}/{SCAN_RESULTS_FILE_NAME}"

    def _lock_for(self, path: str) -> threading.Lock:
        return self._locks[hash(path) % LOCK_STRIPES]

    def _read_all(self, path: str) -> list[ScanResult]:
        try:
            data = self.backend.read(path)
        except StorageKeyNotFound:
            return []
        try:
            return [ScanResult.from_dict(entry) for entry in json.loads(data)]
        except (ValueError, KeyError, TypeError) as e:
            raise IOFailure(f"Stored scan results at '{path}' are corrupt") from e

    def read(
        self,
        package_id: PackageIdentifier,
        provenance: Provenance,
        criteria: ScannerCriteria | None = None,
    ) -> list[ScanResult]:
        path = self.get_results_path(package_id, provenance)
        results = [
            result
            for result in self._read_all(path)
            # the hash in the path is not trusted to tell provenances apart
            if result.package_id == package_id and result.provenance == provenance
        ]
        if criteria is not None:
            results = [result for result in results if criteria.matches(result.scanner)]
        logger.debug(
            f"Read {len(results)} scan result(s) for {package_id.to_coordinates()} from {self.name}."
        )
        return results

    def add(self, package_id: PackageIdentifier, scan_result: ScanResult) -> None:
        if scan_result.package_id != package_id:
            raise ValueError(
                f"Scan result for {scan_result.package_id.to_coordinates()} cannot be stored for {package_id.to_coordinates()}."
            )
        path = self.get_results_path(package_id, scan_result.provenance)
        with self._lock_for(path):
            results = [
                result
                for result in self._read_all(path)
                if not (
                    result.scanner == scan_result.scanner
                    and result.provenance == scan_result.provenance
                )
            ]
            results.append(scan_result)
            data = json.dumps([result.to_dict() for result in results], indent=2)
            self.backend.write(path, data.encode("utf-8"))
        logger.debug(
            f"Stored scan result of {scan_result.scanner.name} {scan_result.scanner.version} for {package_id.to_coordinates()} in {self.name}."
        )
