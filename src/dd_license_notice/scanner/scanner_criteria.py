# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

import re
from dataclasses import dataclass

from packaging.version import InvalidVersion, Version

from dd_license_notice.model.scan_result import ScannerDetails


@dataclass(frozen=True)
class ScannerCriteria:
    """Which stored scan results are compatible with the scanner in use.

    A result matches if its scanner name fully matches name_pattern, its
    version lies in [min_version, max_version) and, when a configuration is
    given, it was produced with exactly that configuration.
    """

    name_pattern: str
    min_version: str
    max_version: str
    configuration: str | None = None

    def matches(self, details: ScannerDetails) -> bool:
        if not re.fullmatch(self.name_pattern, details.name):
            return False
        try:
            version = Version(details.version)
        except InvalidVersion:
            return False
        if not Version(self.min_version) <= version < Version(self.max_version):
            return False
        return self.configuration is None or self.configuration == details.configuration

    @staticmethod
    def for_details(details: ScannerDetails) -> "ScannerCriteria":
        """Criteria accepting results of the same scanner with the same major and minor version."""
        version = Version(details.version)
        return ScannerCriteria(
            name_pattern=re.escape(details.name),
            min_version=f"{version.major}.{version.minor}.0",
            max_version=f"{version.major}.{version.minor + 1}.0",
            configuration=details.configuration,
        )
