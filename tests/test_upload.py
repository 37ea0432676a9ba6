import asyncio
import io

import pytest
from starlette.datastructures import Headers, UploadFile

from nilhub.core.errors import UploadLimitError
from nilhub.services.upload_service import UploadService

PNG = b"\x89PNG\r\n\x1a\n" + b"0" * 64


def test_upload_requires_authentication(client, fake_storage):
    r = client.post("/api/upload/image", files={"image": ("a.png", PNG, "image/png")})
    assert r.status_code == 401


def test_upload_single_image(client, fake_storage, vendor):
    _, _, headers = vendor
    r = client.post(
        "/api/upload/image",
        files={"image": ("a.png", PNG, "image/png")},
        headers=headers,
    )
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["asset_id"].startswith("nilhub/products/")
    assert data["asset_id"].endswith(".png")
    assert data["url"] == f"https://cdn.test/{data['asset_id']}"
    assert data["size"] == len(PNG)
    assert fake_storage["objects"][data["asset_id"]] == PNG


def test_upload_uses_folder_query(client, fake_storage, vendor):
    _, _, headers = vendor
    r = client.post(
        "/api/upload/image",
        params={"folder": "nilhub/logos"},
        files={"image": ("logo.jpg", PNG, "image/jpeg")},
        headers=headers,
    )
    assert r.json()["data"]["asset_id"].startswith("nilhub/logos/")
    assert r.json()["data"]["asset_id"].endswith(".jpg")


def test_upload_rejects_path_traversal_folder(client, fake_storage, vendor):
    _, _, headers = vendor
    r = client.post(
        "/api/upload/image",
        params={"folder": "../secrets"},
        files={"image": ("a.png", PNG, "image/png")},
        headers=headers,
    )
    assert r.status_code == 400


def test_upload_rejects_non_images(client, fake_storage, vendor):
    _, _, headers = vendor
    r = client.post(
        "/api/upload/image",
        files={"image": ("notes.txt", b"hello", "text/plain")},
        headers=headers,
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Only images are allowed"
    assert fake_storage["objects"] == {}


def test_upload_rejects_large_files(client, fake_storage, vendor):
    _, _, headers = vendor
    big = b"0" * (5 * 1024 * 1024 + 1)
    r = client.post(
        "/api/upload/image",
        files={"image": ("big.png", big, "image/png")},
        headers=headers,
    )
    assert r.status_code == 400
    assert r.json()["error"] == "File too large. Maximum size is 5MB"


def test_upload_rejects_unexpected_field(client, fake_storage, vendor):
    _, _, headers = vendor
    r = client.post(
        "/api/upload/image",
        files={"avatar": ("a.png", PNG, "image/png")},
        headers=headers,
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Unexpected file field: avatar"


def test_upload_without_file(client, fake_storage, vendor):
    _, _, headers = vendor
    r = client.post("/api/upload/image", data={"note": "nothing"}, headers=headers)
    assert r.status_code == 400
    assert r.json()["error"] == "No image provided"


def test_upload_many(client, fake_storage, vendor):
    _, _, headers = vendor
    files = [("images", (f"{i}.png", PNG, "image/png")) for i in range(3)]
    r = client.post("/api/upload/images", files=files, headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["count"] == 3
    assert len({img["asset_id"] for img in body["data"]}) == 3


def test_upload_many_limits_count(client, fake_storage, vendor):
    _, _, headers = vendor
    files = [("images", (f"{i}.png", PNG, "image/png")) for i in range(6)]
    r = client.post("/api/upload/images", files=files, headers=headers)
    assert r.status_code == 400
    assert r.json()["error"] == "Too many files. Maximum is 5"
    assert fake_storage["objects"] == {}


def test_delete_asset_with_slashes(client, fake_storage, vendor):
    _, _, headers = vendor
    fake_storage["objects"]["nilhub/products/x.png"] = PNG

    r = client.delete("/api/upload/nilhub/products/x.png", headers=headers)
    assert r.status_code == 200
    assert fake_storage["deleted"] == ["nilhub/products/x.png"]


def test_storage_failure_is_opaque(client, monkeypatch, vendor):
    from nilhub.core.errors import StorageError
    from nilhub.services import upload_service

    def broken(path, file_bytes, content_type):
        raise StorageError("Supabase storage upload failed: 503")

    monkeypatch.setattr(upload_service, "upload_to_storage", broken)
    _, _, headers = vendor
    r = client.post(
        "/api/upload/image",
        files={"image": ("a.png", PNG, "image/png")},
        headers=headers,
    )
    assert r.status_code == 500
    assert r.json()["error"] == "Failed to upload image"


def test_upload_rejects_svg(client, fake_storage, vendor):
    _, _, headers = vendor
    svg = b'<svg xmlns="http://www.w3.org/2000/svg"><script>alert(1)</script></svg>'
    r = client.post(
        "/api/upload/image",
        files={"image": ("logo.svg", svg, "image/svg+xml")},
        headers=headers,
    )
    assert r.status_code == 400
    assert r.json()["error"] == "SVG images are not allowed"
    assert fake_storage["objects"] == {}


# ----- Size limit while reading -----


class _RecordingFile(io.BytesIO):
    def __init__(self, data: bytes):
        super().__init__(data)
        self.reads: list[int] = []

    def read(self, size=-1):
        chunk = super().read(size)
        self.reads.append(len(chunk))
        return chunk


def _image(data: bytes, size: int | None = None) -> tuple[UploadFile, _RecordingFile]:
    raw = _RecordingFile(data)
    upload = UploadFile(
        file=raw,
        size=size,
        filename="big.png",
        headers=Headers({"content-type": "image/png"}),
    )
    return upload, raw


def test_oversized_file_is_not_read_whole():
    service = UploadService(max_bytes=16, max_files=5)
    upload, raw = _image(b"0" * 4096)

    with pytest.raises(UploadLimitError):
        asyncio.run(service._read_image(upload))
    assert sum(raw.reads) <= 17


def test_declared_size_is_rejected_before_reading():
    service = UploadService(max_bytes=16, max_files=5)
    upload, raw = _image(b"0" * 4096, size=4096)

    with pytest.raises(UploadLimitError):
        asyncio.run(service._read_image(upload))
    assert raw.reads == []


def test_file_at_the_limit_is_accepted():
    service = UploadService(max_bytes=16, max_files=5)
    upload, _ = _image(b"0" * 16)

    data, content_type = asyncio.run(service._read_image(upload))
    assert data == b"0" * 16
    assert content_type == "image/png"
