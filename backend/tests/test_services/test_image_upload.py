"""
Unit tests for the ImgBB client, using httpx.MockTransport
"""
import httpx
import pytest

from app.core.exceptions import ImageUploadError
from app.services.image_upload import ImgbbClient


@pytest.fixture
def image(tmp_path):
    path = tmp_path / "rouge.png"
    path.write_bytes(b"\x89PNG")
    return str(path)


def client_returning(status_code, body, seen=None):
    def handler(request):
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=body)
    return ImgbbClient(api_key="key", upload_url="https://upload.test/1/upload",
                       transport=httpx.MockTransport(handler))


def test_returns_hosted_url(image):
    seen = []
    client = client_returning(200, {"success": True, "data": {"url": "https://i.ibb.co/rouge.png"}}, seen)

    assert client.upload_image(image) == "https://i.ibb.co/rouge.png"
    assert seen[0].url.params["key"] == "key"


def test_rejected_upload(image):
    client = client_returning(200, {"success": False})

    with pytest.raises(ImageUploadError):
        client.upload_image(image)


def test_http_error(image):
    client = client_returning(500, {"error": "down"})

    with pytest.raises(ImageUploadError) as exc:
        client.upload_image(image)

    assert exc.value.status_code == 502


def test_missing_api_key(image):
    with pytest.raises(ImageUploadError):
        ImgbbClient(api_key="").upload_image(image)
