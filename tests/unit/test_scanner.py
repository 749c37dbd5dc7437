# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

from datetime import datetime
from pathlib import Path
from unittest.mock import Mock

import pytest_mock
import pytz

from dd_license_notice.artifact_management.source_code_downloader import (
    DownloadError,
    SourceCodeDownloader,
)
from dd_license_notice.model.dependency_graph import DependencyGraph, Package
from dd_license_notice.model.identifier import PackageIdentifier
from dd_license_notice.model.provenance import Provenance, RemoteArtifact
from dd_license_notice.model.scan_result import ScannerDetails, ScanResult
from dd_license_notice.scanner.scan_engine import ScanEngine, ScanEngineFailure
from dd_license_notice.scanner.scan_result_cache import ScanResultCache
from dd_license_notice.scanner.scanner import Scanner
from dd_license_notice.scanner.scanner_criteria import ScannerCriteria
from dd_license_notice.storage.file_archiver import (
    FileArchiver,
    get_archive_storage_path,
)

ROOT = PackageIdentifier("npm", "", "my-project", "")
LEFT_PAD = PackageIdentifier("npm", "", "left-pad", "1.3.0")
IS_ODD = PackageIdentifier("npm", "", "is-odd", "3.0.1")
SCANNER = ScannerDetails("ScanCode", "32.0.8")


def make_package(package_id: PackageIdentifier) -> Package:
    return Package(
        id=package_id,
        source_artifact=RemoteArtifact(
            f"https://registry.example.com/{package_id.name}.tgz", package_id.name
        ),
    )


def make_graph() -> DependencyGraph:
    return DependencyGraph(
        root=ROOT,
        packages={
            package_id: make_package(package_id)
            for package_id in (ROOT, LEFT_PAD, IS_ODD)
        },
        edges={ROOT: {LEFT_PAD, IS_ODD}},
    )


def provenance_of(package_id: PackageIdentifier) -> Provenance:
    return Provenance(source_artifact=make_package(package_id).source_artifact)


def make_scan_result(package_id: PackageIdentifier) -> ScanResult:
    return ScanResult(
        package_id=package_id,
        provenance=provenance_of(package_id),
        scanner=SCANNER,
        start_time=datetime(2024, 1, 1, 10, 0, 0, tzinfo=pytz.UTC),
        end_time=datetime(2024, 1, 1, 10, 1, 0, tzinfo=pytz.UTC),
    )


def make_scanner(
    mocker: pytest_mock.MockFixture,
) -> tuple[Scanner, Mock, Mock, Mock, Mock]:
    cache_mock = mocker.Mock(spec_set=ScanResultCache)
    engine_mock = mocker.Mock(spec=ScanEngine)
    engine_mock.details = SCANNER
    archiver_mock = mocker.Mock(spec_set=FileArchiver)
    downloader_mock = mocker.Mock(spec_set=SourceCodeDownloader)
    downloader_mock.resolve_provenance.side_effect = lambda package: Provenance(
        source_artifact=package.source_artifact
    )
    downloader_mock.download.side_effect = (
        lambda package, provenance, target_dir: target_dir
    )
    scanner = Scanner(
        cache_mock, engine_mock, archiver_mock, downloader_mock, max_workers=2
    )
    return scanner, cache_mock, engine_mock, archiver_mock, downloader_mock


def test_uncached_packages_are_downloaded_scanned_and_archived(
    mocker: pytest_mock.MockFixture,
) -> None:
    scanner, cache_mock, _, archiver_mock, downloader_mock = make_scanner(mocker)
    cache_mock.read.return_value = []

    scan_record = scanner.scan_graph(make_graph())

    assert scan_record.provenances == {
        IS_ODD: provenance_of(IS_ODD),
        LEFT_PAD: provenance_of(LEFT_PAD),
    }
    assert scan_record.failures == {}
    assert downloader_mock.download.call_count == 2
    assert cache_mock.scan_and_add.call_count == 2
    archived_keys = sorted(call.args[1] for call in archiver_mock.archive.call_args_list)
    assert archived_keys == sorted(
        get_archive_storage_path(package_id, provenance_of(package_id))
        for package_id in (IS_ODD, LEFT_PAD)
    )


def test_the_root_project_is_not_scanned(mocker: pytest_mock.MockFixture) -> None:
    scanner, cache_mock, _, _, downloader_mock = make_scanner(mocker)
    cache_mock.read.return_value = []

    scan_record = scanner.scan_graph(make_graph())

    assert ROOT not in scan_record.provenances
    resolved = {
        call.args[0].id for call in downloader_mock.resolve_provenance.call_args_list
    }
    assert resolved == {LEFT_PAD, IS_ODD}


def test_cached_packages_are_not_downloaded(mocker: pytest_mock.MockFixture) -> None:
    scanner, cache_mock, _, archiver_mock, downloader_mock = make_scanner(mocker)
    cache_mock.read.side_effect = lambda package_id, provenance, criteria: [
        make_scan_result(package_id)
    ]

    scan_record = scanner.scan_graph(make_graph())

    assert set(scan_record.provenances) == {LEFT_PAD, IS_ODD}
    downloader_mock.download.assert_not_called()
    cache_mock.scan_and_add.assert_not_called()
    archiver_mock.archive.assert_not_called()


def test_failures_are_recorded_per_package(mocker: pytest_mock.MockFixture) -> None:
    scanner, cache_mock, _, _, downloader_mock = make_scanner(mocker)
    cache_mock.read.return_value = []

    def download(package: Package, provenance: Provenance, target_dir: str) -> str:
        if package.id == LEFT_PAD:
            raise DownloadError("HTTP 404")
        return target_dir

    downloader_mock.download.side_effect = download
    cache_mock.scan_and_add.side_effect = ScanEngineFailure("scancode crashed")

    scan_record = scanner.scan_graph(make_graph())

    assert scan_record.provenances == {}
    assert scan_record.failures == {
        LEFT_PAD: "HTTP 404",
        IS_ODD: "scancode crashed",
    }


def test_unexpected_errors_only_fail_their_package(
    mocker: pytest_mock.MockFixture,
) -> None:
    scanner, cache_mock, _, archiver_mock, downloader_mock = make_scanner(mocker)
    cache_mock.read.return_value = []

    def download(package: Package, provenance: Provenance, target_dir: str) -> str:
        if package.id == LEFT_PAD:
            raise OSError(28, "No space left on device")
        return target_dir

    downloader_mock.download.side_effect = download

    scan_record = scanner.scan_graph(make_graph())

    assert scan_record.provenances == {IS_ODD: provenance_of(IS_ODD)}
    assert scan_record.failures == {LEFT_PAD: "[Errno 28] No space left on device"}
    assert archiver_mock.archive.call_count == 1


def test_programming_errors_are_recorded_as_failures(
    mocker: pytest_mock.MockFixture,
) -> None:
    scanner, cache_mock, _, _, _ = make_scanner(mocker)
    cache_mock.read.return_value = []
    cache_mock.scan_and_add.side_effect = KeyError("license")

    scan_record = scanner.scan_graph(make_graph())

    assert scan_record.provenances == {}
    assert set(scan_record.failures) == {LEFT_PAD, IS_ODD}
    assert all(
        failure.startswith("Unexpected error") for failure in scan_record.failures.values()
    )


def test_scratch_directories_are_removed(mocker: pytest_mock.MockFixture) -> None:
    scanner, cache_mock, _, _, downloader_mock = make_scanner(mocker)
    cache_mock.read.return_value = []
    cache_mock.scan_and_add.side_effect = ScanEngineFailure("scancode crashed")

    scanner.scan_graph(make_graph())

    scratch_dirs = [call.args[2] for call in downloader_mock.download.call_args_list]
    assert len(scratch_dirs) == 2
    assert not any(Path(scratch_dir).exists() for scratch_dir in scratch_dirs)


def test_scratch_directories_are_created_in_the_download_dir(
    mocker: pytest_mock.MockFixture, tmp_path: Path
) -> None:
    _, cache_mock, engine_mock, archiver_mock, downloader_mock = make_scanner(mocker)
    cache_mock.read.return_value = []
    scanner = Scanner(
        cache_mock,
        engine_mock,
        archiver_mock,
        downloader_mock,
        download_dir=str(tmp_path),
    )

    scanner.scan_graph(make_graph())

    scratch_dirs = [call.args[2] for call in downloader_mock.download.call_args_list]
    assert len(scratch_dirs) == 2
    assert all(Path(scratch_dir).parent == tmp_path for scratch_dir in scratch_dirs)


def test_explicit_criteria_are_used_for_cache_lookups(
    mocker: pytest_mock.MockFixture,
) -> None:
    _, cache_mock, engine_mock, archiver_mock, downloader_mock = make_scanner(mocker)
    cache_mock.read.return_value = []
    criteria = ScannerCriteria("ScanCode", "30.0.0", "40.0.0")
    scanner = Scanner(
        cache_mock, engine_mock, archiver_mock, downloader_mock, criteria=criteria
    )

    scanner.scan_graph(make_graph())

    assert {call.args[2] for call in cache_mock.read.call_args_list} == {criteria}
