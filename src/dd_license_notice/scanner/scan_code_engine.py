# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

import logging
from importlib.metadata import version as distribution_version
from typing import Any

import scancode.api

from dd_license_notice.adaptors.datetime import get_datetime_now
from dd_license_notice.adaptors.os import path_join
from dd_license_notice.model.findings import (
    CopyrightFinding,
    LicenseFinding,
    TextLocation,
    associate_findings,
)
from dd_license_notice.model.identifier import PackageIdentifier
from dd_license_notice.model.provenance import Provenance
from dd_license_notice.model.scan_result import ScannerDetails, ScanResult
from dd_license_notice.scanner.scan_engine import ScanEngine, ScanEngineFailure
from dd_license_notice.storage.file_archiver import FileArchiver

# Get application-specific logger
logger = logging.getLogger("dd_license_notice")

SCANNER_NAME = "ScanCode"
IGNORED_LICENSES = {
    "LicenseRef-scancode-unknown-license-reference",
    "LicenseRef-scancode-generic-cla",
}


class ScanCodeEngine(ScanEngine):
    """Scan a source tree file by file with the scancode-toolkit API."""

    def __init__(self, configuration: str = "") -> None:
        self._details = ScannerDetails(
            name=SCANNER_NAME,
            version=distribution_version("scancode-toolkit"),
            configuration=configuration,
        )

    @property
    def details(self) -> ScannerDetails:
        return self._details

    def scan(
        self, source_dir: str, package_id: PackageIdentifier, provenance: Provenance
    ) -> ScanResult:
        start_time = get_datetime_now()
        license_findings: list[LicenseFinding] = []
        copyright_findings: list[CopyrightFinding] = []
        for relative in FileArchiver.archived_files(source_dir):
            file_path = path_join(source_dir, relative)
            try:
                licenses = scancode.api.get_licenses(file_path)
                copyrights = scancode.api.get_copyrights(file_path)
            except Exception as e:
                raise ScanEngineFailure(
                    f"ScanCode failed to scan {relative} of {package_id.to_coordinates()}: {e}"
                ) from e
            license_findings.extend(self.license_findings(relative, licenses))
            copyright_findings.extend(self.copyright_findings(relative, copyrights))
        end_time = get_datetime_now()

        logger.debug(
            f"ScanCode found {len(license_findings)} license and {len(copyright_findings)} copyright finding(s) in {package_id.to_coordinates()}."
        )
        return ScanResult(
            package_id=package_id,
            provenance=provenance,
            scanner=self.details,
            start_time=start_time,
            end_time=end_time,
            license_findings=associate_findings(license_findings, copyright_findings),
            copyright_findings=tuple(copyright_findings),
        )

    @staticmethod
    def cleanup_licenses(expression: str) -> list[str]:
        # split the expression by 'AND' and drop the references scancode uses for unknown texts
        licenses = [
            license.strip().strip("()") for license in expression.split(" AND ")
        ]
        return [
            license
            for license in licenses
            if license and license not in IGNORED_LICENSES
        ]

    @staticmethod
    def _location(path: str, item: dict[str, Any]) -> TextLocation:
        start_line = max(1, int(item.get("start_line") or 1))
        end_line = max(start_line, int(item.get("end_line") or start_line))
        return TextLocation(path=path, start_line=start_line, end_line=end_line)

    @classmethod
    def license_findings(
        cls, path: str, result: dict[str, Any]
    ) -> list[LicenseFinding]:
        findings = []
        for detection in result.get("license_detections") or []:
            detection_expression = detection.get("license_expression_spdx") or ""
            for match in detection.get("matches") or []:
                expression = (
                    match.get("license_expression_spdx") or detection_expression
                )
                location = cls._location(path, match)
                findings.extend(
                    LicenseFinding(license=license, locations=(location,))
                    for license in cls.cleanup_licenses(expression)
                )
        if not findings and result.get("detected_license_expression_spdx"):
            # no match details, attribute the expression to the head of the file
            location = TextLocation(path=path, start_line=1, end_line=1)
            findings.extend(
                LicenseFinding(license=license, locations=(location,))
                for license in cls.cleanup_licenses(
                    result["detected_license_expression_spdx"]
                )
            )
        return findings

    @classmethod
    def copyright_findings(
        cls, path: str, result: dict[str, Any]
    ) -> list[CopyrightFinding]:
        return [
            CopyrightFinding(
                statement=item["copyright"], locations=(cls._location(path, item),)
            )
            for item in result.get("copyrights") or []
            if item.get("copyright")
        ]
