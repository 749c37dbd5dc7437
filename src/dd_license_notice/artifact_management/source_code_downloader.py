# Unless explicitly stated otherwise all files in this repository are licensed under the Apache License Version 2.0.
#
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2026-present Datadog, Inc.

import hashlib
import io
import logging
import re
import shlex
import tarfile
import zipfile

import requests
from giturlparse import parse as parse_git_url

from dd_license_notice.adaptors.os import (
    create_dirs,
    get_absolute_path,
    get_real_path,
    is_directory,
    is_file,
    list_dir,
    output_from_command,
    path_join,
    run_command,
    write_binary_file_atomically,
)
from dd_license_notice.model.dependency_graph import Package
from dd_license_notice.model.provenance import Provenance, RemoteArtifact, VcsInfo

# Get application-specific logger
logger = logging.getLogger("dd_license_notice")

COMMIT_HASH_PATTERN = re.compile(r"[0-9a-f]{40}")
ABBREVIATED_HASH_PATTERN = re.compile(r"[0-9a-f]{7,39}")


class DownloadError(Exception):
    """Exception raised when the source code of a package cannot be fetched."""

    pass


def normalize_vcs_url(url: str) -> str:
    parsed_url = parse_git_url(url)
    if not parsed_url.valid or not parsed_url.github:
        return url
    return f"https://{parsed_url.host}/{parsed_url.owner}/{parsed_url.repo}"


class SourceCodeDownloader:
    """Pin the source location of packages and fetch their code into a directory."""

    def __init__(self, timeout: int = 300) -> None:
        self.timeout = timeout

    def resolve_provenance(self, package: Package) -> Provenance:
        """Pin the location the code of package is fetched from.

        Source artifacts are preferred. A VCS revision is resolved to a commit
        so the provenance stays stable when a branch moves.

        Raises:
            DownloadError: If the package has no usable source location
        """
        if package.source_artifact is not None and package.source_artifact.url:
            return Provenance(source_artifact=package.source_artifact)
        if package.vcs_info is not None and package.vcs_info.url:
            vcs_info = package.vcs_info
            if vcs_info.type.lower() not in ("git", ""):
                raise DownloadError(
                    f"Unsupported VCS type '{vcs_info.type}' for {package.id.to_coordinates()}."
                )
            url = normalize_vcs_url(vcs_info.url)
            return Provenance(
                vcs_info=VcsInfo(
                    type="git",
                    url=url,
                    revision=vcs_info.revision,
                    resolved_revision=self._resolve_git_revision(
                        url, vcs_info.revision
                    ),
                    path=vcs_info.path.strip("/"),
                )
            )
        raise DownloadError(
            f"Package {package.id.to_coordinates()} has neither a source artifact nor a VCS location."
        )

    def _resolve_git_revision(self, url: str, revision: str) -> str:
        if COMMIT_HASH_PATTERN.fullmatch(revision):
            return revision
        output = output_from_command(f"git ls-remote {shlex.quote(url)}")
        refs: dict[str, str] = {}
        for line in output.splitlines():
            parts = line.split()
            if len(parts) == 2:
                refs[parts[1]] = parts[0]
        if not refs:
            raise DownloadError(f"Could not list the references of {url}.")

        ref = revision or "HEAD"
        # peeled tags point at the commit instead of the tag object
        for candidate in (
            ref,
            f"refs/tags/{ref}^{{}}",
            f"refs/tags/{ref}",
            f"refs/heads/{ref}",
        ):
            if candidate in refs:
                logger.debug(f"Resolved {ref} of {url} to {refs[candidate]}")
                return refs[candidate]
        if ABBREVIATED_HASH_PATTERN.fullmatch(ref):
            matches = {sha for sha in refs.values() if sha.startswith(ref)}
            if len(matches) == 1:
                return matches.pop()
        raise DownloadError(f"Could not resolve revision '{ref}' of {url}.")

    def download(self, package: Package, provenance: Provenance, target_dir: str) -> str:
        """Fetch the code pinned by provenance into target_dir.

        Returns:
            The directory holding the source tree to scan

        Raises:
            DownloadError: If the code could not be fetched or unpacked
        """
        create_dirs(target_dir)
        if provenance.vcs_info is not None:
            logger.info(
                f"Checking out {provenance.vcs_info.url} at {provenance.vcs_info.resolved_revision} for {package.id.to_coordinates()}."
            )
            return self._checkout(provenance.vcs_info, target_dir)
        if provenance.source_artifact is None:
            raise DownloadError(
                f"Provenance of {package.id.to_coordinates()} has no source location."
            )
        logger.info(
            f"Downloading {provenance.source_artifact.url} for {package.id.to_coordinates()}."
        )
        return self._download_artifact(provenance.source_artifact, target_dir)

    def _checkout(self, vcs_info: VcsInfo, target_dir: str) -> str:
        target = shlex.quote(target_dir)
        url = shlex.quote(vcs_info.url)
        revision = shlex.quote(vcs_info.resolved_revision or vcs_info.revision)
        if run_command(f"git init -q {target}") != 0:
            raise DownloadError(f"Could not initialize a repository in {target_dir}.")
        if (
            run_command(f"git -C {target} fetch -q --depth 1 {url} {revision}") != 0
            and run_command(f"git -C {target} fetch -q {url}") != 0
        ):
            raise DownloadError(f"Could not fetch {vcs_info.url}.")
        if (
            run_command(
                f"git -C {target} -c advice.detachedHead=false checkout -q {revision}"
            )
            != 0
        ):
            raise DownloadError(
                f"Could not check out {vcs_info.resolved_revision} of {vcs_info.url}."
            )
        if not vcs_info.path:
            return target_dir
        source_dir = path_join(target_dir, vcs_info.path)
        # symlinks are resolved, the real path must stay inside the checkout
        if not self._is_inside(get_real_path(target_dir), get_real_path(source_dir)):
            raise DownloadError(
                f"Path '{vcs_info.path}' points outside of the checkout of {vcs_info.url}."
            )
        if not is_directory(source_dir):
            raise DownloadError(
                f"Path '{vcs_info.path}' is not a directory of {vcs_info.url} at {vcs_info.resolved_revision}."
            )
        return source_dir

    def _download_artifact(self, artifact: RemoteArtifact, target_dir: str) -> str:
        try:
            response = requests.get(artifact.url, timeout=self.timeout)
        except requests.RequestException as e:
            raise DownloadError(f"Could not download {artifact.url}: {e}") from e
        if not response.ok:
            raise DownloadError(
                f"Could not download {artifact.url}: HTTP {response.status_code}"
            )
        content = response.content
        self._verify_hash(artifact, content)

        if zipfile.is_zipfile(io.BytesIO(content)):
            self._extract_zip(content, target_dir)
        elif self._is_tarfile(content):
            self._extract_tar(content, target_dir)
        else:
            file_name = artifact.url.rstrip("/").rsplit("/", 1)[-1] or "artifact"
            write_binary_file_atomically(path_join(target_dir, file_name), content)
            return target_dir

        # archives commonly wrap the sources in a single top level directory
        entries = list_dir(target_dir)
        if len(entries) == 1 and not is_file(path_join(target_dir, entries[0])):
            return path_join(target_dir, entries[0])
        return target_dir

    @staticmethod
    def _verify_hash(artifact: RemoteArtifact, content: bytes) -> None:
        if not artifact.hash_value:
            return
        try:
            digest = hashlib.new(artifact.hash_algorithm.lower().replace("-", ""))
        except ValueError as e:
            raise DownloadError(
                f"Unsupported hash algorithm '{artifact.hash_algorithm}' for {artifact.url}."
            ) from e
        digest.update(content)
        if digest.hexdigest() != artifact.hash_value.lower():
            raise DownloadError(
                f"Hash mismatch for {artifact.url}: expected {artifact.hash_value}, got {digest.hexdigest()}."
            )

    @staticmethod
    def _is_tarfile(content: bytes) -> bool:
        try:
            with tarfile.open(fileobj=io.BytesIO(content), mode="r:*"):
                return True
        except tarfile.TarError:
            return False

    @staticmethod
    def _is_inside(target_dir: str, name: str) -> bool:
        root = get_absolute_path(target_dir)
        path = get_absolute_path(path_join(root, name))
        return path == root or path.startswith(path_join(root, ""))

    def _extract_zip(self, content: bytes, target_dir: str) -> None:
        try:
            with zipfile.ZipFile(io.BytesIO(content)) as zip_file:
                for name in zip_file.namelist():
                    if not self._is_inside(target_dir, name):
                        raise DownloadError(
                            f"Archive entry {name} points outside of {target_dir}."
                        )
                zip_file.extractall(target_dir)
        except zipfile.BadZipFile as e:
            raise DownloadError(f"Could not unpack zip archive: {e}") from e

    def _extract_tar(self, content: bytes, target_dir: str) -> None:
        try:
            with tarfile.open(fileobj=io.BytesIO(content), mode="r:*") as tar_file:
                members = [
                    member
                    for member in tar_file.getmembers()
                    if (member.isfile() or member.isdir())
                    and self._is_inside(target_dir, member.name)
                ]
                tar_file.extractall(target_dir, members=members)
        except tarfile.TarError as e:
            raise DownloadError(f"Could not unpack tar archive: {e}") from e
