# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

import logging
from abc import ABC, abstractmethod

from dd_license_notice.adaptors.os import (
    expand_user_path,
    is_file,
    open_file,
    path_join,
)

# Get application-specific logger
logger = logging.getLogger("dd_license_notice")

LICENSE_FILE_SUFFIXES = ("", ".txt", ".LICENSE")


class LicenseTextProvider(ABC):
    @abstractmethod
    def get_license_text(self, license_id: str) -> str | None:
        """Return the full text of license_id, or None if it is unknown."""
        raise NotImplementedError

    def has_license_text(self, license_id: str) -> bool:
        return self.get_license_text(license_id) is not None


class DirectoryLicenseTextProvider(LicenseTextProvider):
    """Look up license texts as files named after the license id.

    Directories are searched in order, the first match wins. A file may be
    named exactly like the license id or carry a .txt or .LICENSE suffix.
    """

    def __init__(self, directories: list[str]) -> None:
        self.directories = [expand_user_path(directory) for directory in directories]
        self._texts: dict[str, str | None] = {}

    def _find_license_file(self, license_id: str) -> str | None:
        if not license_id or "/" in license_id or "\\" in license_id:
            return None
        if license_id.startswith("."):
            return None
        for directory in self.directories:
            for suffix in LICENSE_FILE_SUFFIXES:
                candidate = path_join(directory, f"{license_id}{suffix}")
                if is_file(candidate):
                    return candidate
        return None

    def get_license_text(self, license_id: str) -> str | None:
        if license_id not in self._texts:
            license_file = self._find_license_file(license_id)
            if license_file is None:
                logger.debug(f"No license text found for {license_id}.")
                self._texts[license_id] = None
            else:
                text = open_file(license_file).replace("\r\n", "\n")
                self._texts[license_id] = text.rstrip("\n") + "\n"
        return self._texts[license_id]
