# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest
import pytest_mock

from dd_license_notice.model.findings import CopyrightFinding, TextLocation
from dd_license_notice.model.identifier import PackageIdentifier
from dd_license_notice.model.provenance import Provenance, RemoteArtifact
from dd_license_notice.scanner.scan_code_engine import ScanCodeEngine
from dd_license_notice.scanner.scan_engine import ScanEngineFailure

PACKAGE_ID = PackageIdentifier("npm", "", "left-pad", "1.3.0")
PROVENANCE = Provenance(
    source_artifact=RemoteArtifact("https://example.com/left-pad.tgz", "abc")
)


def mock_get_licenses(path: str) -> dict[str, Any]:
    if path.endswith("LICENSE"):
        return {
            "detected_license_expression_spdx": "MIT",
            "license_detections": [
                {
                    "license_expression_spdx": "MIT",
                    "matches": [
                        {
                            "license_expression_spdx": "MIT",
                            "start_line": 5,
                            "end_line": 21,
                        }
                    ],
                }
            ],
        }
    if path.endswith("index.js"):
        return {
            "detected_license_expression_spdx": "MIT AND LicenseRef-scancode-unknown-license-reference",
            "license_detections": [],
        }
    return {"detected_license_expression_spdx": None, "license_detections": []}


def mock_get_copyrights(path: str) -> dict[str, Any]:
    if path.endswith("LICENSE"):
        return {
            "copyrights": [
                {"copyright": "Copyright (c) 2018 Foo", "start_line": 3, "end_line": 3}
            ],
            "holders": [],
            "authors": [],
        }
    return {"copyrights": [], "holders": [], "authors": []}


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    (tmp_path / "lib").mkdir()
    (tmp_path / "LICENSE").write_text("MIT License\n")
    (tmp_path / "lib" / "index.js").write_text("// MIT\n")
    (tmp_path / "README.md").write_text("left-pad\n")
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "config").write_text("[core]\n")
    return tmp_path


def make_engine(mocker: pytest_mock.MockFixture) -> tuple[ScanCodeEngine, Mock]:
    mocker.patch(
        "dd_license_notice.scanner.scan_code_engine.distribution_version",
        return_value="32.0.8",
    )
    get_licenses_mock = mocker.patch(
        "scancode.api.get_licenses", side_effect=mock_get_licenses
    )
    mocker.patch("scancode.api.get_copyrights", side_effect=mock_get_copyrights)
    return ScanCodeEngine(), get_licenses_mock


def test_scan_collects_findings_with_locations(
    mocker: pytest_mock.MockFixture, source_dir: Path
) -> None:
    engine, _ = make_engine(mocker)

    scan_result = engine.scan(str(source_dir), PACKAGE_ID, PROVENANCE)

    assert scan_result.package_id == PACKAGE_ID
    assert scan_result.provenance == PROVENANCE
    assert scan_result.scanner.name == "ScanCode"
    assert scan_result.scanner.version == "32.0.8"
    assert len(scan_result.license_findings) == 1
    mit = scan_result.license_findings[0]
    assert mit.license == "MIT"
    assert mit.locations == (
        TextLocation("LICENSE", 5, 21),
        TextLocation("lib/index.js", 1, 1),
    )
    assert mit.copyrights == (
        CopyrightFinding("Copyright (c) 2018 Foo", (TextLocation("LICENSE", 3, 3),)),
    )
    assert scan_result.copyright_findings == mit.copyrights


def test_vcs_directories_are_not_scanned(
    mocker: pytest_mock.MockFixture, source_dir: Path
) -> None:
    engine, get_licenses_mock = make_engine(mocker)

    engine.scan(str(source_dir), PACKAGE_ID, PROVENANCE)

    scanned = {call.args[0] for call in get_licenses_mock.call_args_list}
    assert scanned == {
        str(source_dir / "LICENSE"),
        str(source_dir / "README.md"),
        str(source_dir / "lib" / "index.js"),
    }


def test_scanner_errors_are_wrapped(
    mocker: pytest_mock.MockFixture, source_dir: Path
) -> None:
    engine, _ = make_engine(mocker)
    mocker.patch("scancode.api.get_licenses", side_effect=RuntimeError("timeout"))

    with pytest.raises(ScanEngineFailure, match="timeout"):
        engine.scan(str(source_dir), PACKAGE_ID, PROVENANCE)


def test_cleanup_licenses_drops_unknown_references() -> None:
    assert ScanCodeEngine.cleanup_licenses(
        "MIT AND LicenseRef-scancode-generic-cla AND (Apache-2.0)"
    ) == ["MIT", "Apache-2.0"]
