# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

import pytest
import pytest_mock
import requests

from dd_license_notice.storage.file_storage import IOFailure, StorageKeyNotFound
from dd_license_notice.storage.http_file_storage import HttpFileStorage


def test_read_gets_the_object_url(mocker: pytest_mock.MockFixture) -> None:
    requests_get_mock = mocker.patch("requests.get")
    requests_get_mock.return_value.status_code = 200
    requests_get_mock.return_value.ok = True
    requests_get_mock.return_value.content = b"content"
    storage = HttpFileStorage(
        "https://storage.example.com/archive/", headers={"Authorization": "token"}
    )

    assert storage.read("npm/left-pad/archive.zip") == b"content"
    requests_get_mock.assert_called_once_with(
        "https://storage.example.com/archive/npm/left-pad/archive.zip",
        headers={"Authorization": "token"},
        timeout=60,
    )


def test_read_of_a_missing_object_raises_not_found(
    mocker: pytest_mock.MockFixture,
) -> None:
    requests_get_mock = mocker.patch("requests.get")
    requests_get_mock.return_value.status_code = 404
    requests_get_mock.return_value.ok = False

    with pytest.raises(StorageKeyNotFound):
        HttpFileStorage("https://storage.example.com").read("missing")


def test_server_errors_raise_io_failures(mocker: pytest_mock.MockFixture) -> None:
    requests_get_mock = mocker.patch("requests.get")
    requests_get_mock.return_value.status_code = 500
    requests_get_mock.return_value.ok = False

    with pytest.raises(IOFailure):
        HttpFileStorage("https://storage.example.com").read("key")


def test_connection_errors_raise_io_failures(mocker: pytest_mock.MockFixture) -> None:
    mocker.patch("requests.put", side_effect=requests.ConnectionError("refused"))

    with pytest.raises(IOFailure):
        HttpFileStorage("https://storage.example.com").write("key", b"content")


def test_write_puts_the_data(mocker: pytest_mock.MockFixture) -> None:
    requests_put_mock = mocker.patch("requests.put")
    requests_put_mock.return_value.ok = True

    HttpFileStorage("https://storage.example.com", timeout=5).write("key", b"data")

    requests_put_mock.assert_called_once_with(
        "https://storage.example.com/key", data=b"data", headers={}, timeout=5
    )
