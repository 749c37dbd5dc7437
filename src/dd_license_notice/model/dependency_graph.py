# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

from dataclasses import dataclass, field
from typing import Any

from dd_license_notice.model.identifier import PackageIdentifier
from dd_license_notice.model.provenance import RemoteArtifact, VcsInfo


@dataclass(frozen=True)
class Package:
    """A resolved dependency as handed over by a package manager analyzer."""

    id: PackageIdentifier
    vcs_info: VcsInfo | None = None
    source_artifact: RemoteArtifact | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id.to_coordinates(),
            "vcs_info": self.vcs_info.to_dict() if self.vcs_info else None,
            "source_artifact": (
                self.source_artifact.to_dict() if self.source_artifact else None
            ),
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Package":
        vcs_info = data.get("vcs_info")
        source_artifact = data.get("source_artifact")
        return Package(
            id=PackageIdentifier.from_coordinates(data["id"]),
            vcs_info=VcsInfo.from_dict(vcs_info) if vcs_info else None,
            source_artifact=(
                RemoteArtifact.from_dict(source_artifact) if source_artifact else None
            ),
        )


@dataclass
class DependencyGraph:
    """Normalized dependency graph of a project.

    The root is the project itself and is identified by an empty version.
    """

    root: PackageIdentifier
    packages: dict[PackageIdentifier, Package] = field(default_factory=dict)
    edges: dict[PackageIdentifier, set[PackageIdentifier]] = field(
        default_factory=dict
    )

    def dependencies(self) -> list[Package]:
        """All packages but the root, sorted by identifier."""
        return [
            self.packages[package_id]
            for package_id in sorted(self.packages)
            if package_id != self.root
        ]

    def children(self, package_id: PackageIdentifier) -> list[PackageIdentifier]:
        return sorted(self.edges.get(package_id, set()))

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": self.root.to_coordinates(),
            "packages": [self.packages[key].to_dict() for key in sorted(self.packages)],
            "edges": {
                parent.to_coordinates(): [
                    child.to_coordinates() for child in self.children(parent)
                ]
                for parent in sorted(self.edges)
            },
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "DependencyGraph":
        root = PackageIdentifier.from_coordinates(data["root"])
        packages = {}
        for package_data in data.get("packages", []):
            package = Package.from_dict(package_data)
            packages[package.id] = package
        edges = {
            PackageIdentifier.from_coordinates(parent): {
                PackageIdentifier.from_coordinates(child) for child in children
            }
            for parent, children in data.get("edges", {}).items()
        }
        return DependencyGraph(root=root, packages=packages, edges=edges)
