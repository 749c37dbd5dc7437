# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

import logging
import tempfile
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable

from dd_license_notice.adaptors.os import open_file, path_join
from dd_license_notice.config.cli_configs import default_config
from dd_license_notice.model.copyright_garbage import CopyrightGarbage
from dd_license_notice.model.identifier import PackageIdentifier
from dd_license_notice.model.scan_record import ScanRecord
from dd_license_notice.model.scan_result import ScanResult
from dd_license_notice.report_generator.license_text_provider import (
    LicenseTextProvider,
)
from dd_license_notice.report_generator.writters.abstract_reporting_writter import (
    ReportingWritter,
)
from dd_license_notice.scanner.scan_result_cache import ScanResultCache
from dd_license_notice.scanner.scanner_criteria import ScannerCriteria
from dd_license_notice.storage.file_archiver import (
    ArchiveCorrupt,
    FileArchiver,
    get_archive_storage_path,
)
from dd_license_notice.storage.file_storage import IOFailure
from dd_license_notice.utils.copyright_statements_processor import (
    CopyrightStatementsProcessor,
)
from dd_license_notice.utils.file_matcher import FileMatcher

# Get application-specific logger
logger = logging.getLogger("dd_license_notice")

NOTICE_HEADER = "This project contains or depends on third-party software components pursuant to the following licenses:\n"
NOTICE_SEPARATOR = "\n----\n\n"
LICENSE_SEPARATOR = "\n  --\n\n"


class NoticeByPackageWritter(ReportingWritter):
    """Render one notice section per dependency of a scan record.

    Each section starts with the archived license files of the package,
    followed by the licenses found in its source code that none of those
    files cover, each with its copyright holders and its license text.
    """

    def __init__(
        self,
        scan_result_cache: ScanResultCache,
        file_archiver: FileArchiver,
        license_text_provider: LicenseTextProvider,
        copyright_garbage: CopyrightGarbage | None = None,
        scanner_criteria: ScannerCriteria | None = None,
        license_file_patterns: list[str] | None = None,
        max_workers: int = 1,
    ) -> None:
        self.scan_result_cache = scan_result_cache
        self.file_archiver = file_archiver
        self.license_text_provider = license_text_provider
        self.copyright_garbage = copyright_garbage or CopyrightGarbage()
        self.scanner_criteria = scanner_criteria
        self.license_file_matcher = FileMatcher(
            license_file_patterns or default_config.preset_license_file_patterns
        )
        self.max_workers = max(1, max_workers)
        self.processor = CopyrightStatementsProcessor()

    def write(self, scan_record: ScanRecord) -> str:
        package_ids = [package.id for package in scan_record.graph.dependencies()]
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            sections = list(
                executor.map(
                    lambda package_id: self._package_notice_or_header(
                        package_id, scan_record
                    ),
                    package_ids,
                )
            )
        return NOTICE_HEADER + "".join(sections)

    def _find_scan_result(
        self, package_id: PackageIdentifier, scan_record: ScanRecord
    ) -> ScanResult | None:
        coordinates = package_id.to_coordinates()
        provenance = scan_record.provenances.get(package_id)
        if provenance is None:
            reason = scan_record.failures.get(package_id, "it was never scanned")
            logger.warning(f"No scan result for {coordinates}: {reason}")
            return None
        try:
            scan_results = self.scan_result_cache.read(
                package_id, provenance, self.scanner_criteria
            )
        except IOFailure as e:
            logger.error(f"Could not read the scan results of {coordinates}: {e}")
            return None
        if not scan_results:
            logger.warning(f"No scan result for {coordinates} found in the cache.")
            return None
        return scan_results[0]

    def _unarchive(self, scan_result: ScanResult, directory: str) -> bool:
        try:
            return self.file_archiver.unarchive(
                directory,
                get_archive_storage_path(scan_result.package_id, scan_result.provenance),
            )
        except ArchiveCorrupt as e:
            logger.error(
                f"Ignoring the archived license files of {scan_result.package_id.to_coordinates()}: {e}"
            )
            return False

    def _archived_license_files(self, directory: str) -> list[str]:
        return [
            path
            for path in self.file_archiver.archived_files(directory)
            if self.license_file_matcher.matches(path)
        ]

    def _emitted(self, statements: Iterable[str]) -> list[str]:
        return [
            statement
            for statement in statements
            if statement.strip() and statement not in self.copyright_garbage
        ]

    def _license_file_copyrights(
        self,
        scan_result: ScanResult,
        path: str,
        findings_map: dict[str, set[str]],
    ) -> list[str]:
        """Copyrights of the licenses in the file that the file does not already state."""
        copyrights_in_file = scan_result.copyrights_at_path(path)
        all_copyrights = set(copyrights_in_file)
        for license in scan_result.licenses_at_path(path):
            all_copyrights.update(findings_map.get(license, set()))

        processed = self.processor.process(all_copyrights)
        statements = {
            statement
            for statement, sources in processed.processed_statements.items()
            if not sources & copyrights_in_file
        }
        statements.update(processed.unprocessed_statements - copyrights_in_file)
        return self._emitted(sorted(statements))

    def _license_file_blocks(
        self,
        scan_result: ScanResult,
        directory: str,
        findings_map: dict[str, set[str]],
    ) -> tuple[list[str], set[str]]:
        blocks = []
        covered_licenses: set[str] = set()
        for path in self._archived_license_files(directory):
            covered_licenses.update(scan_result.licenses_at_path(path))
            content = open_file(path_join(directory, path)).replace("\r\n", "\n")
            block = [
                f"This package contains the file {path} with the following contents:\n\n",
                f"{content}\n",
            ]
            copyrights = self._license_file_copyrights(scan_result, path, findings_map)
            if copyrights:
                block.append(
                    "The following copyright holder information relates to the license(s) above:\n"
                )
                block.extend(f"{statement}\n" for statement in copyrights)
            blocks.append("".join(block))
        return blocks, covered_licenses

    def _license_blocks(
        self, findings_map: dict[str, set[str]], covered_licenses: set[str]
    ) -> list[str]:
        blocks = []
        for license in sorted(findings_map):
            if license in covered_licenses:
                continue
            license_text = self.license_text_provider.get_license_text(license)
            if license_text is None:
                logger.warning(
                    f"No license text found for license {license}, it will be omitted from the notice."
                )
                continue
            copyrights = self._emitted(
                self.processor.process(findings_map[license]).all_statements()
            )
            block = "".join(f"{statement}\n" for statement in copyrights)
            if copyrights:
                block += "\n"
            blocks.append(block + license_text)
        return blocks

    @staticmethod
    def _section_header(package_id: PackageIdentifier) -> str:
        return f"{NOTICE_SEPARATOR}Package: {package_id.display_name()}\n\n"

    def _package_notice_or_header(
        self, package_id: PackageIdentifier, scan_record: ScanRecord
    ) -> str:
        coordinates = package_id.to_coordinates()
        try:
            return self.package_notice(package_id, scan_record)
        except (OSError, IOFailure, ValueError) as e:
            logger.error(f"Could not add the licenses of {coordinates} to the notice: {e}")
        except Exception:
            logger.exception(
                f"Unexpected error while adding the licenses of {coordinates} to the notice"
            )
        return self._section_header(package_id)

    def package_notice(
        self, package_id: PackageIdentifier, scan_record: ScanRecord
    ) -> str:
        lines = [self._section_header(package_id)]
        scan_result = self._find_scan_result(package_id, scan_record)
        file_blocks: list[str] = []
        license_blocks: list[str] = []
        if scan_result is not None:
            findings_map = self.copyright_garbage.remove_garbage_from_map(
                scan_result.license_findings_map()
            )
            with tempfile.TemporaryDirectory(prefix="dd-license-notice-") as directory:
                covered_licenses: set[str] = set()
                if self._unarchive(scan_result, directory):
                    file_blocks, covered_licenses = self._license_file_blocks(
                        scan_result, directory, findings_map
                    )
            license_blocks = self._license_blocks(findings_map, covered_licenses)

        lines.extend(file_blocks)
        if license_blocks:
            lines.append(
                "The following copyrights and licenses were found in the source code of this package:\n\n"
            )
            lines.append(LICENSE_SEPARATOR.join(license_blocks))
        if not file_blocks and not license_blocks:
            logger.error(
                f"No license information was added to the notice for package {package_id.to_coordinates()}."
            )
        return "".join(lines)
