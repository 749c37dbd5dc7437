# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

from dataclasses import dataclass, field
from typing import Any

from dd_license_notice.model.dependency_graph import DependencyGraph
from dd_license_notice.model.identifier import PackageIdentifier
from dd_license_notice.model.provenance import Provenance


@dataclass
class ScanRecord:
    """Outcome of scanning a dependency graph.

    Scan results themselves live in the scan result storage; the record only
    keeps which provenance was scanned for each package and why the others
    failed.
    """

    graph: DependencyGraph
    provenances: dict[PackageIdentifier, Provenance] = field(default_factory=dict)
    failures: dict[PackageIdentifier, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "graph": self.graph.to_dict(),
            "provenances": {
                package_id.to_coordinates(): provenance.to_dict()
                for package_id, provenance in sorted(self.provenances.items())
            },
            "failures": {
                package_id.to_coordinates(): message
                for package_id, message in sorted(self.failures.items())
            },
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "ScanRecord":
        return ScanRecord(
            graph=DependencyGraph.from_dict(data["graph"]),
            provenances={
                PackageIdentifier.from_coordinates(key): Provenance.from_dict(value)
                for key, value in data.get("provenances", {}).items()
            },
            failures={
                PackageIdentifier.from_coordinates(key): value
                for key, value in data.get("failures", {}).items()
            },
        )
