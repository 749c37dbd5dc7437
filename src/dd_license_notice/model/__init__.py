# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

from dd_license_notice.model.copyright_garbage import CopyrightGarbage
from dd_license_notice.model.dependency_graph import DependencyGraph, Package
from dd_license_notice.model.findings import (
    CopyrightFinding,
    LicenseFinding,
    TextLocation,
)
from dd_license_notice.model.identifier import MalformedIdentifier, PackageIdentifier
from dd_license_notice.model.provenance import Provenance, RemoteArtifact, VcsInfo
from dd_license_notice.model.scan_record import ScanRecord
from dd_license_notice.model.scan_result import ScannerDetails, ScanResult

__all__ = [
    "CopyrightFinding",
    "CopyrightGarbage",
    "DependencyGraph",
    "LicenseFinding",
    "MalformedIdentifier",
    "Package",
    "PackageIdentifier",
    "Provenance",
    "RemoteArtifact",
    "ScannerDetails",
    "ScanRecord",
    "ScanResult",
    "TextLocation",
    "VcsInfo",
]
