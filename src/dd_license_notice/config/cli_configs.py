# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2024-present Datadog, Inc.

from dataclasses import dataclass


def _case_variants(patterns: list[str]) -> list[str]:
    # file matching is case-sensitive, so spell out the common variants
    variants = set()
    for pattern in patterns:
        variants.update({pattern.lower(), pattern.upper(), pattern.capitalize()})
    return sorted(variants)


@dataclass
class Config:
    preset_license_file_patterns: list[str]
    preset_archive_dir: str
    preset_scan_results_dir: str
    preset_license_texts_dir: str
    preset_notice_file_name: str
    preset_max_workers: int


default_config = Config(
    preset_license_file_patterns=_case_variants(
        [
            "copying*",
            "copyright",
            "licence*",  # I know it is misspelled, but it is common in the wild
            "license*",
            "*.licence",
            "*.license",
            "notice*",
            "patents",
            "unlicence",
            "unlicense",
        ]
    ),
    preset_archive_dir="~/.dd-license-notice/scanner/archive",
    preset_scan_results_dir="~/.dd-license-notice/scanner/scan-results",
    preset_license_texts_dir="~/.dd-license-notice/license-texts",
    preset_notice_file_name="NOTICE_BY_PACKAGE",
    preset_max_workers=4,
)
