# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2024-present Datadog, Inc.

"""Here we collect a set of OS wrappers and adaptors to be easily replaced during testing and debugging."""

import os
import tempfile
from typing import Iterator


def run_command(command: str) -> int:
    return os.system(f"{command} >&2")


def output_from_command(command: str) -> str:
    return os.popen(command).read()


def list_dir(path: str) -> list[str]:
    return os.listdir(path)


def is_file(file_path: str) -> bool:
    return os.path.isfile(file_path)


def is_symlink(path: str) -> bool:
    return os.path.islink(path)


def is_directory(path: str) -> bool:
    return os.path.isdir(path)


def create_dirs(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def walk_directory(path: str) -> Iterator[tuple[str, list[str], list[str]]]:
    return os.walk(path)


def expand_user_path(path: str) -> str:
    return os.path.expanduser(path)


def get_absolute_path(path: str) -> str:
    return os.path.abspath(path)


def get_real_path(path: str) -> str:
    return os.path.realpath(path)


def relative_path(path: str, start: str) -> str:
    return os.path.relpath(path, start)


def path_join(path: str, *paths: str) -> str:
    return os.path.join(path, *paths)


def open_file(file_path: str) -> str:
    try:
        with open(file_path, "r", encoding="utf-8") as file:
            return file.read()
    except UnicodeDecodeError:
        try:
            with open(file_path, "r", encoding="utf-16") as file:
                return file.read()
        except UnicodeDecodeError:
            with open(file_path, "r", encoding="latin-1") as file:
                return file.read()


def write_file(file_path: str, content: str) -> None:
    # newline="" keeps the Unix line endings of the content on every platform
    with open(file_path, "w", encoding="utf-8", newline="") as file:
        file.write(content)


def read_binary_file(file_path: str) -> bytes:
    with open(file_path, "rb") as file:
        return file.read()


def write_binary_file_atomically(file_path: str, content: bytes) -> None:
    directory = os.path.dirname(file_path) or "."
    create_dirs(directory)
    fd, temp_path = tempfile.mkstemp(dir=directory, prefix=".tmp-")
    try:
        with os.fdopen(fd, "wb") as file:
            file.write(content)
        os.replace(temp_path, file_path)
    except BaseException:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise
