# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

import pytest

from dd_license_notice.model.scan_result import ScannerDetails
from dd_license_notice.scanner.scanner_criteria import ScannerCriteria


@pytest.mark.parametrize(
    "details, expected",
    [
        (ScannerDetails("ScanCode", "32.0.0"), True),
        (ScannerDetails("ScanCode", "32.0.8"), True),
        (ScannerDetails("ScanCode", "32.1.0"), False),
        (ScannerDetails("ScanCode", "31.2.6"), False),
        (ScannerDetails("ScanCode", "32.0.0", "--strict"), False),
        (ScannerDetails("Licensee", "32.0.8"), False),
        (ScannerDetails("ScanCode", "not a version"), False),
    ],
)
def test_criteria_for_details_accepts_the_same_minor_version(
    details: ScannerDetails, expected: bool
) -> None:
    criteria = ScannerCriteria.for_details(ScannerDetails("ScanCode", "32.0.8"))

    assert criteria == ScannerCriteria("ScanCode", "32.0.0", "32.1.0", "")
    assert criteria.matches(details) is expected


def test_criteria_without_configuration_accepts_any_configuration() -> None:
    criteria = ScannerCriteria("Scan.*", "1.0", "3.0")

    assert criteria.matches(ScannerDetails("ScanCode", "2.5", "--strict"))
    assert not criteria.matches(ScannerDetails("ScanCode", "3.0"))
