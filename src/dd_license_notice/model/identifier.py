# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

from dataclasses import dataclass
from urllib.parse import quote


class MalformedIdentifier(ValueError):
    """Exception raised when a package coordinate string cannot be parsed."""

    pass


def _path_segment(component: str) -> str:
    # a single path segment that never navigates, even for "." and ".."
    if not component:
        return "unknown"
    if component in (".", ".."):
        return component.replace(".", "%2E")
    return quote(component, safe="")


@dataclass(frozen=True, order=True)
class PackageIdentifier:
    """Identity of a package or project, ordered by (type, namespace, name, version)."""

    type: str  # source ecosystem tag, e.g. npm, pypi, go
    namespace: str  # npm scope, maven group, go module host, may be empty
    name: str
    version: str  # empty for the root project

    @staticmethod
    def from_coordinates(coordinates: str) -> "PackageIdentifier":
        """Parse "type:namespace:name:version" or "type:name:version".

        Raises:
            MalformedIdentifier: If the string does not have 3 or 4 components or
                the type or name component is empty.
        """
        if not isinstance(coordinates, str):
            raise MalformedIdentifier(f"Invalid package coordinates: {coordinates!r}")
        parts = coordinates.strip().split(":")
        if len(parts) == 4:
            id_type, namespace, name, version = parts
        elif len(parts) == 3:
            id_type, name, version = parts
            namespace = ""
        else:
            raise MalformedIdentifier(
                f"Invalid package coordinates: '{coordinates}'. Expected format: 'type:namespace:name:version'"
            )
        if not id_type or not name:
            raise MalformedIdentifier(
                f"Invalid package coordinates: '{coordinates}'. Type and name must not be empty"
            )
        return PackageIdentifier(
            type=id_type, namespace=namespace, name=name, version=version
        )

    def to_coordinates(self) -> str:
        if not self.namespace:
            return f"{self.type}:{self.name}:{self.version}"
        return f"{self.type}:{self.namespace}:{self.name}:{self.version}"

    def to_path(self) -> str:
        return "/".join(
            _path_segment(component)
            for component in (self.type, self.namespace, self.name, self.version)
        )

    def display_name(self) -> str:
        if self.namespace:
            return f"{self.namespace}:{self.name}:{self.version}"
        return f"{self.name}:{self.version}"

    def __str__(self) -> str:
        return self.to_coordinates()
