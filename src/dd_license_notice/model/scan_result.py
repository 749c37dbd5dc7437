# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from dd_license_notice.adaptors.datetime import format_timestamp, parse_timestamp
from dd_license_notice.model.findings import (
    CopyrightFinding,
    LicenseFinding,
    merge_copyright_findings,
    merge_license_findings,
)
from dd_license_notice.model.identifier import PackageIdentifier
from dd_license_notice.model.provenance import Provenance


@dataclass(frozen=True)
class ScannerDetails:
    name: str
    version: str
    configuration: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "configuration": self.configuration,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "ScannerDetails":
        return ScannerDetails(
            name=data["name"],
            version=data["version"],
            configuration=data.get("configuration", ""),
        )


@dataclass(frozen=True)
class ScanResult:
    """The findings of one scanner run over the source code of one package.

    License findings are unique by license: findings for the same license are
    merged on construction, joining their locations and copyrights.
    """

    package_id: PackageIdentifier
    provenance: Provenance
    scanner: ScannerDetails
    start_time: datetime
    end_time: datetime
    license_findings: tuple[LicenseFinding, ...] = field(default_factory=tuple)
    copyright_findings: tuple[CopyrightFinding, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "license_findings", merge_license_findings(self.license_findings)
        )
        object.__setattr__(
            self,
            "copyright_findings",
            merge_copyright_findings(self.copyright_findings),
        )

    def license_findings_map(self) -> dict[str, set[str]]:
        """Map each license to the copyright statements associated with it."""
        return {
            finding.license: {copyright.statement for copyright in finding.copyrights}
            for finding in self.license_findings
        }

    def licenses_at_path(self, path: str) -> set[str]:
        return {
            finding.license
            for finding in self.license_findings
            if finding.is_at_path(path)
        }

    def copyrights_at_path(self, path: str) -> set[str]:
        statements = {
            finding.statement
            for finding in self.copyright_findings
            if finding.is_at_path(path)
        }
        for license_finding in self.license_findings:
            statements.update(
                copyright.statement
                for copyright in license_finding.copyrights
                if copyright.is_at_path(path)
            )
        return statements

    def to_dict(self) -> dict[str, Any]:
        return {
            "package_id": self.package_id.to_coordinates(),
            "provenance": self.provenance.to_dict(),
            "scanner": self.scanner.to_dict(),
            "start_time": format_timestamp(self.start_time),
            "end_time": format_timestamp(self.end_time),
            "license_findings": [
                finding.to_dict() for finding in self.license_findings
            ],
            "copyright_findings": [
                finding.to_dict() for finding in self.copyright_findings
            ],
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "ScanResult":
        return ScanResult(
            package_id=PackageIdentifier.from_coordinates(data["package_id"]),
            provenance=Provenance.from_dict(data["provenance"]),
            scanner=ScannerDetails.from_dict(data["scanner"]),
            start_time=parse_timestamp(data["start_time"]),
            end_time=parse_timestamp(data["end_time"]),
            license_findings=tuple(
                LicenseFinding.from_dict(finding)
                for finding in data.get("license_findings", [])
            ),
            copyright_findings=tuple(
                CopyrightFinding.from_dict(finding)
                for finding in data.get("copyright_findings", [])
            ),
        )
