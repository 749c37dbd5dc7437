# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

import hashlib
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class VcsInfo:
    type: str  # git, hg, svn...
    url: str
    revision: str  # branch, tag or commit as requested
    resolved_revision: str | None = None  # commit actually checked out
    path: str = ""  # sub-path inside the repository

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "url": self.url,
            "revision": self.revision,
            "resolved_revision": self.resolved_revision,
            "path": self.path,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "VcsInfo":
        return VcsInfo(
            type=data.get("type", ""),
            url=data["url"],
            revision=data.get("revision", ""),
            resolved_revision=data.get("resolved_revision"),
            path=data.get("path", ""),
        )


@dataclass(frozen=True)
class RemoteArtifact:
    url: str
    hash_value: str
    hash_algorithm: str = "sha1"

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "hash_value": self.hash_value,
            "hash_algorithm": self.hash_algorithm,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "RemoteArtifact":
        return RemoteArtifact(
            url=data["url"],
            hash_value=data.get("hash_value", ""),
            hash_algorithm=data.get("hash_algorithm", "sha1"),
        )


@dataclass(frozen=True)
class Provenance:
    """Where the scanned source code came from: a VCS checkout or a source artifact."""

    vcs_info: VcsInfo | None = None
    source_artifact: RemoteArtifact | None = None

    def __post_init__(self) -> None:
        if (self.vcs_info is None) == (self.source_artifact is None):
            raise ValueError(
                "A provenance needs exactly one of a VCS info or a source artifact."
            )

    def canonical_string(self) -> str:
        if self.vcs_info is not None:
            vcs = self.vcs_info
            return (
                f"VcsInfo(type={vcs.type}, url={vcs.url}, revision={vcs.revision}, "
                f"resolved_revision={vcs.resolved_revision or ''}, path={vcs.path})"
            )
        if self.source_artifact is not None:
            artifact = self.source_artifact
            return (
                f"RemoteArtifact(url={artifact.url}, "
                f"hash={artifact.hash_algorithm}:{artifact.hash_value})"
            )
        raise ValueError("Provenance has no source location.")

    def storage_hash(self) -> str:
        """SHA-1 hex digest of the canonical string, used to partition storages."""
        return hashlib.sha1(self.canonical_string().encode("utf-8")).hexdigest()

    def to_dict(self) -> dict[str, Any]:
        if self.vcs_info is not None:
            return {"vcs_info": self.vcs_info.to_dict()}
        if self.source_artifact is not None:
            return {"source_artifact": self.source_artifact.to_dict()}
        raise ValueError("Provenance has no source location.")

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Provenance":
        vcs_info = data.get("vcs_info")
        source_artifact = data.get("source_artifact")
        return Provenance(
            vcs_info=VcsInfo.from_dict(vcs_info) if vcs_info else None,
            source_artifact=(
                RemoteArtifact.from_dict(source_artifact) if source_artifact else None
            ),
        )

    def __str__(self) -> str:
        return self.canonical_string()
