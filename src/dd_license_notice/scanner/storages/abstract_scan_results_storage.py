# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

from abc import ABC, abstractmethod

from dd_license_notice.model.identifier import PackageIdentifier
from dd_license_notice.model.provenance import Provenance
from dd_license_notice.model.scan_result import ScanResult
from dd_license_notice.scanner.scanner_criteria import ScannerCriteria


class ScanResultsStorage(ABC):
    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def read(
        self,
        package_id: PackageIdentifier,
        provenance: Provenance,
        criteria: ScannerCriteria | None = None,
    ) -> list[ScanResult]:
        """Return the stored results for exactly this package and provenance.

        Raises:
            IOFailure: If the backend could not be read
        """
        raise NotImplementedError

    @abstractmethod
    def add(self, package_id: PackageIdentifier, scan_result: ScanResult) -> None:
        """Store scan_result, replacing a result of the same scanner for the same key.

        Raises:
            IOFailure: If the backend could not be written
        """
        raise NotImplementedError
