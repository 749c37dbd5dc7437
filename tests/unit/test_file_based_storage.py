# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

import threading
from datetime import datetime
from pathlib import Path

import pytest
import pytest_mock
import pytz

from dd_license_notice.model.findings import LicenseFinding, TextLocation
from dd_license_notice.model.identifier import PackageIdentifier
from dd_license_notice.model.provenance import Provenance, VcsInfo
from dd_license_notice.model.scan_result import ScannerDetails, ScanResult
from dd_license_notice.scanner.scanner_criteria import ScannerCriteria
from dd_license_notice.scanner.storages.file_based_storage import (
    LOCK_STRIPES,
    FileBasedStorage,
)
from dd_license_notice.storage.file_storage import FileStorage, IOFailure
from dd_license_notice.storage.local_file_storage import LocalFileStorage

PACKAGE_ID = PackageIdentifier("npm", "@nestjs", "platform-express", "6.2.3")
PROVENANCE_1 = Provenance(
    vcs_info=VcsInfo("git", "https://github.com/nestjs/nest", "v6.2.3", "1" * 40)
)
PROVENANCE_2 = Provenance(
    vcs_info=VcsInfo("git", "https://github.com/nestjs/nest", "v6.2.3", "2" * 40)
)


def make_scan_result(
    provenance: Provenance = PROVENANCE_1,
    version: str = "32.0.8",
    license: str = "MIT",
    minute: int = 0,
) -> ScanResult:
    return ScanResult(
        package_id=PACKAGE_ID,
        provenance=provenance,
        scanner=ScannerDetails("ScanCode", version),
        start_time=datetime(2024, 1, 1, 10, minute, 0, tzinfo=pytz.UTC),
        end_time=datetime(2024, 1, 1, 10, minute, 30, tzinfo=pytz.UTC),
        license_findings=(LicenseFinding(license, (TextLocation("LICENSE", 1, 20),)),),
    )


def test_added_results_are_read_back(tmp_path: Path) -> None:
    storage = FileBasedStorage(LocalFileStorage(str(tmp_path)))
    scan_result = make_scan_result()

    storage.add(PACKAGE_ID, scan_result)

    assert storage.read(PACKAGE_ID, PROVENANCE_1) == [scan_result]
    assert (
        tmp_path
        / "npm/%40nestjs/platform-express/6.2.3"
        / PROVENANCE_1.storage_hash()
        / "scan_results.json"
    ).is_file()


def test_results_of_another_provenance_are_never_returned(tmp_path: Path) -> None:
    storage = FileBasedStorage(LocalFileStorage(str(tmp_path)))
    storage.add(PACKAGE_ID, make_scan_result(PROVENANCE_1, license="MIT"))

    assert storage.read(PACKAGE_ID, PROVENANCE_2) == []

    storage.add(PACKAGE_ID, make_scan_result(PROVENANCE_2, license="Apache-2.0"))

    assert [
        r.license_findings[0].license for r in storage.read(PACKAGE_ID, PROVENANCE_1)
    ] == ["MIT"]
    assert [
        r.license_findings[0].license for r in storage.read(PACKAGE_ID, PROVENANCE_2)
    ] == ["Apache-2.0"]


def test_adding_a_result_of_the_same_scanner_replaces_it(tmp_path: Path) -> None:
    storage = FileBasedStorage(LocalFileStorage(str(tmp_path)))
    storage.add(PACKAGE_ID, make_scan_result(license="MIT", minute=0))
    storage.add(PACKAGE_ID, make_scan_result(version="31.2.6", minute=1))

    storage.add(PACKAGE_ID, make_scan_result(license="BSD-3-Clause", minute=2))

    results = storage.read(PACKAGE_ID, PROVENANCE_1)
    assert sorted(
        (r.scanner.version, r.license_findings[0].license) for r in results
    ) == [("31.2.6", "MIT"), ("32.0.8", "BSD-3-Clause")]


def test_read_filters_by_criteria(tmp_path: Path) -> None:
    storage = FileBasedStorage(LocalFileStorage(str(tmp_path)))
    storage.add(PACKAGE_ID, make_scan_result(version="31.2.6"))
    storage.add(PACKAGE_ID, make_scan_result(version="32.0.8"))

    results = storage.read(
        PACKAGE_ID, PROVENANCE_1, ScannerCriteria("ScanCode", "32.0.0", "32.1.0")
    )

    assert [result.scanner.version for result in results] == ["32.0.8"]


def test_add_rejects_a_result_of_another_package(tmp_path: Path) -> None:
    storage = FileBasedStorage(LocalFileStorage(str(tmp_path)))

    with pytest.raises(ValueError):
        storage.add(PackageIdentifier("npm", "", "other", "1.0"), make_scan_result())


def test_corrupt_stored_results_raise_io_failure(
    mocker: pytest_mock.MockFixture,
) -> None:
    backend_mock = mocker.Mock(spec_set=FileStorage)
    backend_mock.read.return_value = b"{not json"

    with pytest.raises(IOFailure):
        FileBasedStorage(backend_mock).read(PACKAGE_ID, PROVENANCE_1)


def test_concurrent_adds_for_the_same_key_keep_every_scanner(tmp_path: Path) -> None:
    storage = FileBasedStorage(LocalFileStorage(str(tmp_path)))
    versions = [f"32.0.{patch}" for patch in range(8)]

    threads = [
        threading.Thread(
            target=storage.add, args=(PACKAGE_ID, make_scan_result(version=version))
        )
        for version in versions
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    results = storage.read(PACKAGE_ID, PROVENANCE_1)
    assert sorted(result.scanner.version for result in results) == versions


def test_locks_do_not_grow_with_the_number_of_packages(tmp_path: Path) -> None:
    storage = FileBasedStorage(LocalFileStorage(str(tmp_path)))
    for patch in range(200):
        package_id = PackageIdentifier("npm", "", "left-pad", f"1.3.{patch}")
        storage.add(
            package_id,
            ScanResult(
                package_id=package_id,
                provenance=PROVENANCE_1,
                scanner=ScannerDetails("ScanCode", "32.0.8"),
                start_time=datetime(2024, 1, 1, 10, 0, 0, tzinfo=pytz.UTC),
                end_time=datetime(2024, 1, 1, 10, 0, 30, tzinfo=pytz.UTC),
            ),
        )

    assert len(storage._locks) == LOCK_STRIPES
    path = FileBasedStorage.get_results_path(PACKAGE_ID, PROVENANCE_1)
    assert storage._lock_for(path) is storage._lock_for(path)
