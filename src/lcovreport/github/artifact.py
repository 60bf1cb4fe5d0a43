"""Upload a directory as a workflow artifact through the Actions results service."""

from __future__ import annotations

import base64
import hashlib
import io
import json
import os
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol
from urllib.parse import urlsplit

import httpx

from lcovreport._meta import logger
from lcovreport.errors import ArtifactUploadError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

_SERVICE = "twirp/github.actions.results.api.v1.ArtifactService"
_SCOPE_PREFIX = "Actions.Results:"
_ARTIFACT_VERSION = 4
_TIMEOUT = 60


class ArtifactUploader(Protocol):
    def upload(self, name: str, files: Sequence[Path], root_directory: Path) -> int: ...


@dataclass(frozen=True, slots=True)
class BackendIds:
    workflow_run_backend_id: str
    workflow_job_run_backend_id: str


def backend_ids_from_token(token: str) -> BackendIds:
    """Read the run/job backend ids from the ``scp`` claim of the runtime JWT."""
    parts = token.split(".")
    if len(parts) < 2:  # noqa: PLR2004
        msg = "ACTIONS_RUNTIME_TOKEN is not a JWT"
        raise ArtifactUploadError(msg)
    segment = parts[1] + "=" * (-len(parts[1]) % 4)
    try:
        claims = json.loads(base64.urlsafe_b64decode(segment))
    except (ValueError, UnicodeDecodeError) as exc:
        msg = f"failed to decode ACTIONS_RUNTIME_TOKEN: {exc}"
        raise ArtifactUploadError(msg) from exc

    for scope in str(claims.get("scp", "")).split():
        if scope.startswith(_SCOPE_PREFIX):
            fields = scope.split(":")
            if len(fields) == 3:  # noqa: PLR2004
                return BackendIds(fields[1], fields[2])
    msg = "ACTIONS_RUNTIME_TOKEN carries no Actions.Results scope"
    raise ArtifactUploadError(msg)


def zip_files(files: Sequence[Path], root_directory: Path) -> bytes:
    """Return a zip archive of *files*, stored relative to *root_directory*."""
    buffer = io.BytesIO()
    root = root_directory.resolve()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for path in files:
            resolved = path.resolve()
            try:
                arcname = resolved.relative_to(root).as_posix()
            except ValueError as exc:
                msg = f"{path} is not under the artifact root {root_directory}"
                raise ArtifactUploadError(msg) from exc
            archive.write(resolved, arcname)
    return buffer.getvalue()


class ResultsServiceUploader:
    """Artifact (v4) uploader: create, upload a zip to the signed URL, finalize."""

    def __init__(
        self,
        runtime_token: str,
        results_url: str,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._token = runtime_token
        parts = urlsplit(results_url)
        self._origin = f"{parts.scheme}://{parts.netloc}"
        self._ids = backend_ids_from_token(runtime_token)
        self._transport = transport

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ResultsServiceUploader:
        env = os.environ if environ is None else environ
        token = env.get("ACTIONS_RUNTIME_TOKEN", "")
        results_url = env.get("ACTIONS_RESULTS_URL", "")
        if not token or not results_url:
            msg = "Unable to upload artifact: ACTIONS_RUNTIME_TOKEN or ACTIONS_RESULTS_URL is not set"
            raise ArtifactUploadError(msg)
        return cls(token, results_url)

    def _call(self, client: httpx.Client, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self._origin}/{_SERVICE}/{method}"
        try:
            response = client.post(
                url,
                json=payload,
                headers={"Authorization": f"Bearer {self._token}"},
            )
        except httpx.HTTPError as exc:
            msg = f"{method} failed: {exc}"
            raise ArtifactUploadError(msg) from exc
        if response.status_code >= 300:  # noqa: PLR2004
            msg = f"{method} returned {response.status_code}: {response.text}"
            raise ArtifactUploadError(msg)
        data = response.json()
        if not data.get("ok"):
            msg = f"{method} was rejected by the artifact service"
            raise ArtifactUploadError(msg)
        return data

    def upload(self, name: str, files: Sequence[Path], root_directory: Path) -> int:
        """Upload *files* as artifact *name* and return the artifact id."""
        if not files:
            msg = f"Unable to upload artifact {name!r}: no files to upload"
            raise ArtifactUploadError(msg)
        ids = {
            "workflow_run_backend_id": self._ids.workflow_run_backend_id,
            "workflow_job_run_backend_id": self._ids.workflow_job_run_backend_id,
        }
        archive = zip_files(files, root_directory)
        digest = hashlib.sha256(archive).hexdigest()

        with httpx.Client(timeout=_TIMEOUT, transport=self._transport) as client:
            created = self._call(
                client, "CreateArtifact", {**ids, "name": name, "version": _ARTIFACT_VERSION}
            )
            signed_url = created.get("signed_upload_url")
            if not signed_url:
                msg = "CreateArtifact returned no signed upload URL"
                raise ArtifactUploadError(msg)

            logger.info("Uploading artifact %s (%d file(s), %d bytes)", name, len(files), len(archive))
            try:
                response = client.put(
                    signed_url,
                    content=archive,
                    headers={"x-ms-blob-type": "BlockBlob", "Content-Type": "application/zip"},
                )
            except httpx.HTTPError as exc:
                msg = f"artifact blob upload failed: {exc}"
                raise ArtifactUploadError(msg) from exc
            if response.status_code >= 300:  # noqa: PLR2004
                msg = f"artifact blob upload returned {response.status_code}"
                raise ArtifactUploadError(msg)

            finalized = self._call(
                client,
                "FinalizeArtifact",
                {**ids, "name": name, "size": str(len(archive)), "hash": f"sha256:{digest}"},
            )

        artifact_id = int(finalized.get("artifact_id", 0))
        logger.info("Artifact %s successfully finalized. Artifact ID %d", name, artifact_id)
        return artifact_id


__all__ = [
    "ArtifactUploader",
    "BackendIds",
    "ResultsServiceUploader",
    "backend_ids_from_token",
    "zip_files",
]
