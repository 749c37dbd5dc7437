# SPDX-License-Identifier: Apache-2.0
#
# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

import re

from dd_license_notice.config.cli_configs import default_config


def glob_to_regex(pattern: str) -> str:
    """Translate a glob into an anchored regular expression.

    `*` and `?` never match a `/`, `**` matches across directories and `**/`
    also matches no directory at all. Character classes support `!` and `^`
    negation.
    """
    regex = ""
    i = 0
    length = len(pattern)
    while i < length:
        char = pattern[i]
        if char == "*":
            if pattern.startswith("**", i):
                if pattern.startswith("**/", i):
                    regex += "(?:.*/)?"
                    i += 3
                else:
                    regex += ".*"
                    i += 2
                continue
            regex += "[^/]*"
        elif char == "?":
            regex += "[^/]"
        elif char == "[":
            end = pattern.find("]", i + 2)
            if end == -1:
                regex += re.escape(char)
            else:
                content = pattern[i + 1 : end]
                negate = content[0] in "!^"
                if negate:
                    content = content[1:]
                for special in ("\\", "[", "]"):
                    content = content.replace(special, "\\" + special)
                regex += f"[{'^/' if negate else ''}{content}]"
                i = end
        else:
            regex += re.escape(char)
        i += 1
    return f"^{regex}$"


class FileMatcher:
    """Determine whether a relative path is matched by any of the given globs.

    Patterns without a `/` are matched against the file name only, all other
    patterns against the full relative path. Matching is case-sensitive.
    """

    def __init__(self, patterns: list[str]) -> None:
        self.patterns = list(patterns)
        self._path_matchers = []
        self._name_matchers = []
        for pattern in self.patterns:
            compiled = re.compile(glob_to_regex(pattern), re.DOTALL)
            if "/" in pattern:
                self._path_matchers.append(compiled)
            else:
                self._name_matchers.append(compiled)

    def matches(self, path: str) -> bool:
        if not isinstance(path, str) or not path or "\x00" in path:
            return False
        path = path.replace("\\", "/").removeprefix("./")
        name = path.rsplit("/", 1)[-1]
        return any(matcher.match(path) for matcher in self._path_matchers) or any(
            matcher.match(name) for matcher in self._name_matchers
        )


LICENSE_FILE_MATCHER = FileMatcher(default_config.preset_license_file_patterns)
