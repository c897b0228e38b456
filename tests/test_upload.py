# tests/test_upload.py
import re

import pytest
from botocore.exceptions import ClientError

from belajarshafa.core.config import settings
from belajarshafa.main import app
from belajarshafa.services import upload_service
from belajarshafa.services.s3_client import get_s3_client

KEY_PATTERN = re.compile(
    r"^course-materials/\d{13}-[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"
    r"-modul-tajwid--1\.pdf$"
)


class FakeS3Client:
    """Records put_object calls instead of talking to a bucket."""

    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def put_object(self, **kwargs):
        if self.error is not None:
            raise self.error
        self.calls.append(kwargs)
        return {"ETag": '"fake"'}


@pytest.fixture
def fake_s3(client):
    fake = FakeS3Client()
    app.dependency_overrides[get_s3_client] = lambda: fake
    return fake


class TestUploadKeys:
    def test_generate_key_sanitizes_name(self):
        key = upload_service.generate_key("course-materials", "Modul Tajwid #1.PDF")
        assert KEY_PATTERN.match(key), key

    def test_public_url_joins_base_and_key(self, monkeypatch):
        monkeypatch.setattr(settings, "S3_PUBLIC_BASE_URL", "https://cdn.belajar.id/")
        assert upload_service.public_url("a/b.png") == "https://cdn.belajar.id/a/b.png"


class TestUploadEndpoints:
    def test_document_upload(self, client, fake_s3, test_manager, auth_headers):
        resp = client.post(
            "/api/upload/document",
            files={"file": ("Modul Tajwid #1.pdf", b"%PDF-1.4 data", "application/pdf")},
            headers=auth_headers(test_manager),
        )
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["success"] is True
        assert body["data"]["file_name"] == "Modul Tajwid #1.pdf"
        assert body["data"]["file_size"] == len(b"%PDF-1.4 data")
        assert KEY_PATTERN.match(body["data"]["key"])
        assert body["data"]["url"].endswith(body["data"]["key"])

        assert len(fake_s3.calls) == 1
        call = fake_s3.calls[0]
        assert call["Bucket"] == settings.S3_BUCKET_NAME
        assert call["ContentType"] == "application/pdf"

    def test_image_goes_to_thumbnail_prefix(self, client, fake_s3, test_manager, auth_headers):
        resp = client.post(
            "/api/upload/image",
            files={"file": ("cover.PNG", b"\x89PNG", "image/png")},
            headers=auth_headers(test_manager),
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["key"].startswith("course-thumbnails/")
        assert fake_s3.calls[0]["ContentType"] == "image/png"

    def test_disallowed_extension(self, client, fake_s3, test_manager, auth_headers):
        resp = client.post(
            "/api/upload/document",
            files={"file": ("script.exe", b"MZ", "application/octet-stream")},
            headers=auth_headers(test_manager),
        )
        assert resp.status_code == 400
        assert resp.json()["detail"].startswith("Invalid file type")
        assert fake_s3.calls == []

    def test_size_cap(self, client, fake_s3, test_manager, auth_headers, monkeypatch):
        monkeypatch.setattr(settings, "MAX_DOCUMENT_SIZE", 1024 * 1024)
        resp = client.post(
            "/api/upload/document",
            files={"file": ("besar.pdf", b"x" * (1024 * 1024 + 1), "application/pdf")},
            headers=auth_headers(test_manager),
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "File size exceeds maximum allowed size of 1MB"
        assert fake_s3.calls == []

    def test_oversized_body_read_is_bounded(
        self, client, fake_s3, test_manager, auth_headers, monkeypatch
    ):
        cap = 1024 * 1024
        monkeypatch.setattr(settings, "MAX_DOCUMENT_SIZE", cap)
        seen = []
        real_upload = upload_service.upload_document

        def recording_upload(s3_client, *, filename, data):
            seen.append(len(data))
            return real_upload(s3_client, filename=filename, data=data)

        monkeypatch.setattr(upload_service, "upload_document", recording_upload)
        resp = client.post(
            "/api/upload/document",
            files={"file": ("besar.pdf", b"x" * (3 * cap), "application/pdf")},
            headers=auth_headers(test_manager),
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "File size exceeds maximum allowed size of 1MB"
        assert seen == [cap + 1]
        assert fake_s3.calls == []

    def test_storage_error_becomes_bad_request(
        self, client, fake_s3, test_manager, auth_headers
    ):
        fake_s3.error = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, "PutObject"
        )
        resp = client.post(
            "/api/upload/image",
            files={"file": ("cover.jpg", b"jpeg", "image/jpeg")},
            headers=auth_headers(test_manager),
        )
        assert resp.status_code == 400
        assert resp.json()["detail"].startswith("Failed to upload file")

    def test_mentee_forbidden(self, client, fake_s3, test_mentee, auth_headers):
        resp = client.post(
            "/api/upload/image",
            files={"file": ("cover.jpg", b"jpeg", "image/jpeg")},
            headers=auth_headers(test_mentee),
        )
        assert resp.status_code == 403
