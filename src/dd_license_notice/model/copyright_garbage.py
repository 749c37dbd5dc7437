# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

from dataclasses import dataclass, field
from typing import Iterable


@dataclass(frozen=True)
class CopyrightGarbage:
    """Known bogus copyright statements that must never show up in a notice."""

    items: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", frozenset(self.items))

    def __contains__(self, statement: object) -> bool:
        return statement in self.items

    def remove_garbage(self, statements: Iterable[str]) -> set[str]:
        return {statement for statement in statements if statement not in self.items}

    def remove_garbage_from_map(
        self, findings_map: dict[str, set[str]]
    ) -> dict[str, set[str]]:
        return {
            license: self.remove_garbage(statements)
            for license, statements in sorted(findings_map.items())
        }
