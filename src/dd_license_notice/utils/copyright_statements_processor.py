# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

"""Merge raw copyright statements into one canonical statement per holder.

"Copyright 2018 Foo", "copyright (c) 2019 foo." and "(C) Foo 2020" all end up
as "Copyright (C) 2018-2020 Foo". Statements that do not start with a copyright
marker or do not name a holder are returned untouched as unprocessed.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable

_YEAR = r"(?:19|20)\d{2}"

_MARKER = re.compile(r"^(?:copyright(?:ed)?\b|\(c\)|©)", re.IGNORECASE)
_LEADING_YEARS = re.compile(
    rf"^({_YEAR})(?:\s*[-–]\s*({_YEAR}|present))?(?=[\s,;.]|$)", re.IGNORECASE
)
_TRAILING_YEARS = re.compile(
    rf"[\s,;]({_YEAR})(?:\s*[-–]\s*({_YEAR}|present))?[\s.]*$", re.IGNORECASE
)
_LEADING_BY = re.compile(r"^by\s+", re.IGNORECASE)
_ALL_RIGHTS_RESERVED = re.compile(r"[\s.,;]*all rights reserved[\s.]*$", re.IGNORECASE)
_HAS_LETTER = re.compile(r"[^\W\d_]")

_LEADING_PUNCTUATION = " \t,;:-–"
_TRAILING_PUNCTUATION = " \t,;:-–"


@dataclass
class _Years:
    years: set[int] = field(default_factory=set)
    present_from: int | None = None

    def add(self, start: str, end: str | None) -> None:
        first = int(start)
        if end is None:
            self.years.add(first)
        elif end.lower() == "present":
            self.years.add(first)
            if self.present_from is None or first < self.present_from:
                self.present_from = first
        else:
            last = int(end)
            if last < first:
                first, last = last, first
            self.years.update(range(first, last + 1))

    def update(self, other: "_Years") -> None:
        self.years.update(other.years)
        if other.present_from is not None and (
            self.present_from is None or other.present_from < self.present_from
        ):
            self.present_from = other.present_from

    def format(self) -> str:
        years = sorted(self.years)
        if self.present_from is not None:
            years = [year for year in years if year < self.present_from]
        ranges: list[list[int]] = []
        for year in years:
            if ranges and ranges[-1][1] == year - 1:
                ranges[-1][1] = year
            else:
                ranges.append([year, year])
        if self.present_from is not None:
            if ranges and ranges[-1][1] == self.present_from - 1:
                start = ranges.pop()[0]
            else:
                start = self.present_from
            return ", ".join(_format_range(r) for r in ranges) + (
                ", " if ranges else ""
            ) + f"{start}-present"
        return ", ".join(_format_range(r) for r in ranges)


def _format_range(year_range: list[int]) -> str:
    first, last = year_range
    return str(first) if first == last else f"{first}-{last}"


@dataclass
class _ParsedStatement:
    holder: str
    years: _Years


def _parse(statement: str) -> _ParsedStatement | None:
    text = " ".join(statement.split())
    if not _MARKER.match(text):
        return None

    years = _Years()
    changed = True
    while changed:
        before = text
        text = _MARKER.sub("", text, count=1).lstrip(_LEADING_PUNCTUATION)
        match = _LEADING_YEARS.match(text)
        if match:
            years.add(match.group(1), match.group(2))
            text = text[match.end() :].lstrip(_LEADING_PUNCTUATION + ".")
        text = _LEADING_BY.sub("", text)
        changed = text != before

    changed = True
    while changed:
        before = text
        text = _ALL_RIGHTS_RESERVED.sub("", text)
        match = _TRAILING_YEARS.search(text)
        if match:
            years.add(match.group(1), match.group(2))
            text = text[: match.start()]
        text = text.rstrip(_TRAILING_PUNCTUATION)
        changed = text != before

    if not _HAS_LETTER.search(text):
        return None
    return _ParsedStatement(holder=text, years=years)


def _holder_key(holder: str) -> str:
    return " ".join(re.findall(r"\w+", holder.casefold()))


@dataclass
class ProcessedCopyrights:
    # canonical statement -> raw statements it was merged from
    processed_statements: dict[str, set[str]] = field(default_factory=dict)
    unprocessed_statements: set[str] = field(default_factory=set)

    def all_statements(self) -> list[str]:
        return sorted(set(self.processed_statements) | self.unprocessed_statements)


class CopyrightStatementsProcessor:
    """Deduplicate copyright statements by holder, merging their years.

    The outcome only depends on the set of input statements, never on their
    order, and processing the outcome again returns the same statements.
    """

    def process(self, statements: Iterable[str]) -> ProcessedCopyrights:
        groups: dict[str, tuple[set[str], _Years, set[str]]] = {}
        unprocessed: set[str] = set()

        for statement in set(statements):
            if not isinstance(statement, str):
                unprocessed.add(str(statement))
                continue
            parsed = _parse(statement)
            if parsed is None:
                unprocessed.add(statement)
                continue
            spellings, years, sources = groups.setdefault(
                _holder_key(parsed.holder), (set(), _Years(), set())
            )
            spellings.add(parsed.holder)
            years.update(parsed.years)
            sources.add(statement)

        processed: dict[str, set[str]] = {}
        for spellings, years, sources in groups.values():
            formatted_years = years.format()
            holder = min(spellings)
            if formatted_years:
                canonical = f"Copyright (C) {formatted_years} {holder}"
            else:
                canonical = f"Copyright (C) {holder}"
            processed[canonical] = sources

        return ProcessedCopyrights(
            processed_statements=dict(sorted(processed.items())),
            unprocessed_statements=unprocessed,
        )
