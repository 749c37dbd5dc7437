# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

from dataclasses import dataclass, field
from typing import Any, Iterable


@dataclass(frozen=True, order=True)
class TextLocation:
    path: str  # relative to the scanned source root
    start_line: int
    end_line: int

    def __post_init__(self) -> None:
        if self.start_line < 1:
            raise ValueError(f"Start line must be at least 1, got {self.start_line}")
        if self.end_line < self.start_line:
            raise ValueError(
                f"End line {self.end_line} is before start line {self.start_line}"
            )

    def __str__(self) -> str:
        return f"{self.path}:{self.start_line}-{self.end_line}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "start_line": self.start_line,
            "end_line": self.end_line,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "TextLocation":
        return TextLocation(
            path=data["path"],
            start_line=int(data["start_line"]),
            end_line=int(data["end_line"]),
        )


def _sorted_unique(items: Iterable[Any]) -> tuple[Any, ...]:
    return tuple(sorted(set(items)))


@dataclass(frozen=True, order=True)
class CopyrightFinding:
    statement: str
    locations: tuple[TextLocation, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "locations", _sorted_unique(self.locations))

    def is_at_path(self, path: str) -> bool:
        return any(location.path == path for location in self.locations)

    def to_dict(self) -> dict[str, Any]:
        return {
            "statement": self.statement,
            "locations": [location.to_dict() for location in self.locations],
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "CopyrightFinding":
        return CopyrightFinding(
            statement=data["statement"],
            locations=tuple(
                TextLocation.from_dict(location)
                for location in data.get("locations", [])
            ),
        )


def merge_copyright_findings(
    findings: Iterable[CopyrightFinding],
) -> tuple[CopyrightFinding, ...]:
    """Merge findings with the same statement into one, joining their locations."""
    locations_by_statement: dict[str, set[TextLocation]] = {}
    for finding in findings:
        locations_by_statement.setdefault(finding.statement, set()).update(
            finding.locations
        )
    return tuple(
        CopyrightFinding(statement=statement, locations=tuple(locations))
        for statement, locations in sorted(locations_by_statement.items())
    )


@dataclass(frozen=True, order=True)
class LicenseFinding:
    license: str
    locations: tuple[TextLocation, ...] = field(default_factory=tuple)
    copyrights: tuple[CopyrightFinding, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "locations", _sorted_unique(self.locations))
        object.__setattr__(
            self, "copyrights", merge_copyright_findings(self.copyrights)
        )

    def is_at_path(self, path: str) -> bool:
        return any(location.path == path for location in self.locations)

    def to_dict(self) -> dict[str, Any]:
        return {
            "license": self.license,
            "locations": [location.to_dict() for location in self.locations],
            "copyrights": [copyright.to_dict() for copyright in self.copyrights],
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "LicenseFinding":
        return LicenseFinding(
            license=data["license"],
            locations=tuple(
                TextLocation.from_dict(location)
                for location in data.get("locations", [])
            ),
            copyrights=tuple(
                CopyrightFinding.from_dict(copyright)
                for copyright in data.get("copyrights", [])
            ),
        )


def merge_license_findings(
    findings: Iterable[LicenseFinding],
) -> tuple[LicenseFinding, ...]:
    """Merge findings for the same license so each license appears only once."""
    grouped: dict[str, tuple[set[TextLocation], list[CopyrightFinding]]] = {}
    for finding in findings:
        locations, copyrights = grouped.setdefault(finding.license, (set(), []))
        locations.update(finding.locations)
        copyrights.extend(finding.copyrights)
    return tuple(
        LicenseFinding(
            license=license,
            locations=tuple(locations),
            copyrights=tuple(copyrights),
        )
        for license, (locations, copyrights) in sorted(grouped.items())
    )


def associate_findings(
    license_findings: Iterable[LicenseFinding],
    copyright_findings: Iterable[CopyrightFinding],
) -> tuple[LicenseFinding, ...]:
    """Attach every copyright finding to the license findings detected in the same file."""
    copyright_findings = list(copyright_findings)
    associated = []
    for license_finding in license_findings:
        paths = {location.path for location in license_finding.locations}
        copyrights = list(license_finding.copyrights)
        for copyright_finding in copyright_findings:
            in_same_files = tuple(
                location
                for location in copyright_finding.locations
                if location.path in paths
            )
            if in_same_files:
                copyrights.append(
                    CopyrightFinding(
                        statement=copyright_finding.statement,
                        locations=in_same_files,
                    )
                )
        associated.append(
            LicenseFinding(
                license=license_finding.license,
                locations=license_finding.locations,
                copyrights=tuple(copyrights),
            )
        )
    return merge_license_findings(associated)
