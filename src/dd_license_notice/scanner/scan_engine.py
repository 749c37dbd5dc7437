# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

from abc import ABC, abstractmethod

from dd_license_notice.model.identifier import PackageIdentifier
from dd_license_notice.model.provenance import Provenance
from dd_license_notice.model.scan_result import ScannerDetails, ScanResult


class ScanEngineFailure(Exception):
    """Exception raised when the external scanner fails on a source tree."""

    pass


class ScanEngine(ABC):
    @property
    @abstractmethod
    def details(self) -> ScannerDetails:
        raise NotImplementedError

    @abstractmethod
    def scan(
        self, source_dir: str, package_id: PackageIdentifier, provenance: Provenance
    ) -> ScanResult:
        raise NotImplementedError
