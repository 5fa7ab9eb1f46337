"""
Tests for mandatory resource handling:
1. extract_pdf_text / resource_text — PyMuPDF extraction and fallbacks
2. BlobResourceProvider — listing and downloading against a stand-in
   container client (no network)
"""
from types import SimpleNamespace

import fitz
import pytest
from azure.core.exceptions import ResourceNotFoundError, ServiceRequestError

from factories import mandatory_item

from learning_cycle.errors import ResourceUnavailable
from learning_cycle.resources import BlobResourceProvider, _blob_name, extract_pdf_text, resource_text


def make_pdf(path, text):
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), text)
    doc.save(str(path))
    doc.close()
    return path


# ─── Content extraction ──────────────────────────────────────────────────────

class TestExtraction:
    def test_pdf_text(self, tmp_path):
        pdf = make_pdf(tmp_path / "policy.pdf", "Always lock your screen")
        assert "Always lock your screen" in extract_pdf_text(pdf)

    def test_unreadable_pdf_gives_empty_string(self, tmp_path):
        bogus = tmp_path / "bogus.pdf"
        bogus.write_bytes(b"%PDF-garbage")
        assert extract_pdf_text(bogus) == ""

    def test_pdf_type_is_case_insensitive(self, tmp_path):
        pdf = make_pdf(tmp_path / "a.pdf", "Hello PDF")
        assert "Hello PDF" in resource_text("Application/PDF", pdf, fallback="ignored")

    def test_non_pdf_prefers_listed_content(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_text("file text", encoding="utf-8")
        assert resource_text("text/plain", path, fallback="listed text") == "listed text"

    def test_non_pdf_reads_file_when_no_content(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_text("file text", encoding="utf-8")
        assert resource_text("text/plain", path) == "file text"


# ─── BlobResourceProvider ────────────────────────────────────────────────────

class _FakeDownload:
    def __init__(self, data):
        self.data = data

    def readall(self):
        return self.data


class _FakeBlobClient:
    def __init__(self, container, name):
        self.container = container
        self.name      = name
        self.url       = f"https://acct.blob.core.windows.net/{container.container_name}/{name.replace(' ', '%20')}"

    def download_blob(self):
        if self.name not in self.container.data:
            raise ResourceNotFoundError("blob not found")
        return _FakeDownload(self.container.data[self.name])


class _FakeContainer:
    container_name = "training"

    def __init__(self, blobs):
        # blobs: name → (bytes, content_type, metadata)
        self.blobs = blobs
        self.data  = {name: spec[0] for name, spec in blobs.items()}

    def list_blobs(self, include=None):
        for name, (_, content_type, metadata) in self.blobs.items():
            yield SimpleNamespace(
                name=name,
                metadata=metadata,
                content_settings=SimpleNamespace(content_type=content_type),
            )

    def get_blob_client(self, name):
        return _FakeBlobClient(self, name)


class _UnreachableContainer(_FakeContainer):
    def list_blobs(self, include=None):
        raise ServiceRequestError("network down")


class TestBlobResourceProvider:
    def _provider(self, tmp_path):
        container = _FakeContainer({
            "code of conduct.txt": (b"Be kind.", "text/plain", {"title": "Code of Conduct"}),
            "handbook.pdf":        (b"%PDF-1.7 ...", "application/pdf", {}),
        })
        return BlobResourceProvider(container, tmp_path / "downloads")

    def test_list(self, tmp_path):
        listed = self._provider(tmp_path).list()
        assert [r.title for r in listed] == ["Code of Conduct", "handbook.pdf"]
        assert listed[0].content == "Be kind."
        assert listed[1].content == ""
        assert listed[1].type == "application/pdf"

    def test_download_uses_blob_name_from_url(self, tmp_path):
        provider = self._provider(tmp_path)
        item = provider.list()[0]
        path = provider.download(item)
        assert path.name == "code of conduct.txt"
        assert path.read_bytes() == b"Be kind."

    def test_download_failure_returns_none(self, tmp_path):
        provider = self._provider(tmp_path)
        missing = mandatory_item("Gone.txt")
        assert provider.download(missing) is None

    def test_blob_name(self):
        url = "https://acct.blob.core.windows.net/training/folder/a%20b.pdf"
        assert _blob_name(url, "training") == "folder/a b.pdf"
        assert _blob_name("https://elsewhere/x.pdf", "training") == ""

    def test_unreachable_container_raises_resource_unavailable(self, tmp_path):
        provider = BlobResourceProvider(_UnreachableContainer({}), tmp_path / "downloads")
        with pytest.raises(ResourceUnavailable):
            provider.list()
