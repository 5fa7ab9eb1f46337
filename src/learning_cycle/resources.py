"""
resources.py — Mandatory learning resources
===========================================
The mandatory-learning step treats its resource source as an enumerable,
fetchable collection:

  ResourceProvider.list()          → list[MandatoryLearningResource]
                                     (ResourceUnavailable when the source is unreachable)
  ResourceProvider.download(res)   → local Path, or None on failure

``BlobResourceProvider`` implements it over an Azure Blob Storage container
(titles from the blob's ``title`` metadata, falling back to the blob name).
Files are downloaded into the configured downloads folder.

``resource_text`` turns a downloaded resource into text a tutor can
discuss: PDFs go through PyMuPDF, anything else uses the listed content or
the downloaded file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol
from urllib.parse import unquote, urlparse

import fitz  # PyMuPDF
from azure.core.credentials import AzureNamedKeyCredential
from azure.core.exceptions import AzureError
from azure.storage.blob import BlobServiceClient, ContainerClient

from learning_cycle.config import BlobStorageConfig
from learning_cycle.errors import ResourceUnavailable
from learning_cycle.models import MandatoryLearningResource

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
_TEXT_TYPES = ("text/", "application/json", "application/xml")


class ResourceProvider(Protocol):
    def list(self) -> list[MandatoryLearningResource]:
        ...

    def download(self, resource: MandatoryLearningResource) -> Optional[Path]:
        ...


# ─── Azure Blob Storage ──────────────────────────────────────────────────────

class BlobResourceProvider:
    """Mandatory resources stored as blobs in one container."""

    def __init__(self, container: ContainerClient, downloads_dir: str | Path) -> None:
        self._container = container
        self._downloads = Path(downloads_dir)

    @classmethod
    def from_config(cls, config: BlobStorageConfig, downloads_dir: str | Path) -> "BlobResourceProvider":
        service = BlobServiceClient(
            account_url=config.service_endpoint,
            credential=AzureNamedKeyCredential(config.account_name, config.account_key),
        )
        return cls(service.get_container_client(config.container_name), downloads_dir)

    def list(self) -> list[MandatoryLearningResource]:
        resources = []
        try:
            for blob in self._container.list_blobs(include=["metadata"]):
                client = self._container.get_blob_client(blob.name)
                content_type = (blob.content_settings.content_type or "") if blob.content_settings else ""
                content = ""
                if content_type.startswith(_TEXT_TYPES):
                    content = client.download_blob().readall().decode("utf-8", errors="replace")
                resources.append(MandatoryLearningResource(
                    title       = (blob.metadata or {}).get("title", blob.name),
                    content_uri = client.url,
                    content     = content,
                    type        = content_type,
                ))
        except AzureError as exc:
            logger.error("Listing container %r failed: %s", self._container.container_name, exc)
            raise ResourceUnavailable("Failed to list the mandatory learning resources.") from exc
        logger.info("Listed %d mandatory resource(s)", len(resources))
        return resources

    def download(self, resource: MandatoryLearningResource) -> Optional[Path]:
        blob_name = _blob_name(resource.content_uri, self._container.container_name) or resource.title
        target = self._downloads / Path(blob_name).name
        try:
            data = self._container.get_blob_client(blob_name).download_blob().readall()
            self._downloads.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except (AzureError, OSError) as exc:
            logger.error("Download of %r failed: %s", resource.title, exc)
            return None
        return target


def _blob_name(content_uri: str, container_name: str) -> str:
    """Blob name from a blob URL (``https://acct/…/<container>/<name>``)."""
    path = unquote(urlparse(content_uri).path).lstrip("/")
    prefix = container_name + "/"
    return path[len(prefix):] if path.startswith(prefix) else ""


# ─── Content extraction ──────────────────────────────────────────────────────

def extract_pdf_text(path: str | Path) -> str:
    """Text of every page, or '' when the file cannot be read."""
    try:
        with fitz.open(str(path)) as doc:
            return "\n".join(page.get_text() for page in doc)
    except Exception as exc:  # PyMuPDF raises a mix of RuntimeError subclasses
        logger.error("Error extracting text from PDF %s: %s", path, exc)
        return ""


def resource_text(content_type: str, path: Path, fallback: str = "") -> str:
    """Discussable text for a downloaded resource."""
    if content_type.strip().lower() == PDF_CONTENT_TYPE:
        return extract_pdf_text(path)
    if fallback.strip():
        return fallback
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Could not read %s as text: %s", path, exc)
        return ""
