"""
Photo upload — route and uploader tests
========================================
Outbound calls to the media host are mocked with patch("httpx.AsyncClient").
"""
import hashlib

import httpx
import pytest
from unittest.mock import patch, AsyncMock, MagicMock

from members_api.core.config import MediaHostConfig
from members_api.core.errors import MissingFileError, UploadError
from members_api.core.utils import sign_upload_params
from members_api.media.uploader import MediaUploader

SECURE_URL = "https://res.cloudinary.com/demo/image/upload/v1700000000/abc.jpg"


def _mock_client(status_code=200, body=None, text="", side_effect=None):
    mock_resp = MagicMock(status_code=status_code, text=text)
    mock_resp.json.return_value = body if body is not None else {"secure_url": SECURE_URL}
    mock_client = AsyncMock()
    mock_client.post.return_value = mock_resp
    if side_effect is not None:
        mock_client.post.side_effect = side_effect
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


def _uploader():
    return MediaUploader(MediaHostConfig(
        cloud_name="demo", api_key="123456", api_secret="s3cr3t",
    ))


# ══════════════════════════════════════════════════════════════════════════
# POST /upload
# ══════════════════════════════════════════════════════════════════════════
class TestUploadRoute:
    def test_upload_success(self, client):
        mock_client = _mock_client()
        with patch("httpx.AsyncClient", return_value=mock_client):
            r = client.post("/upload", files={"file": ("foto.jpg", b"\xff\xd8\xff", "image/jpeg")})
        assert r.status_code == 200
        assert r.json() == {"secure_url": SECURE_URL}
        mock_client.post.assert_awaited_once()

    def test_upload_without_file(self, client):
        mock_client = _mock_client()
        with patch("httpx.AsyncClient", return_value=mock_client) as mock_cls:
            r = client.post("/upload")
        assert r.status_code == 400
        assert r.json() == {"message": "Nenhum arquivo enviado."}
        mock_cls.assert_not_called()

    def test_upload_with_other_field_only(self, client):
        with patch("httpx.AsyncClient") as mock_cls:
            r = client.post("/upload", files={"photo": ("foto.jpg", b"abc", "image/jpeg")})
        assert r.status_code == 400
        mock_cls.assert_not_called()

    def test_upload_empty_file(self, client):
        with patch("httpx.AsyncClient") as mock_cls:
            r = client.post("/upload", files={"file": ("foto.jpg", b"", "image/jpeg")})
        assert r.status_code == 400
        mock_cls.assert_not_called()

    def test_upload_host_rejects(self, client):
        mock_client = _mock_client(
            status_code=401, body={"error": {"message": "Invalid Signature abc"}},
            text='{"error":{"message":"Invalid Signature abc"}}',
        )
        with patch("httpx.AsyncClient", return_value=mock_client):
            r = client.post("/upload", files={"file": ("foto.jpg", b"abc", "image/jpeg")})
        assert r.status_code == 500
        assert r.json() == {"message": "Erro ao fazer upload da imagem."}
        assert "Signature" not in r.text

    def test_upload_host_unreachable(self, client):
        mock_client = _mock_client(side_effect=httpx.ConnectError("Connection refused"))
        with patch("httpx.AsyncClient", return_value=mock_client):
            r = client.post("/upload", files={"file": ("foto.jpg", b"abc", "image/jpeg")})
        assert r.status_code == 500

    def test_upload_never_touches_store(self, app, client):
        store = MagicMock()
        app.state.member_store = store
        with patch("httpx.AsyncClient", return_value=_mock_client()):
            r = client.post("/upload", files={"file": ("foto.jpg", b"abc", "image/jpeg")})
        assert r.status_code == 200
        assert store.method_calls == []


# ══════════════════════════════════════════════════════════════════════════
# MediaUploader
# ══════════════════════════════════════════════════════════════════════════
class TestMediaUploader:
    def test_upload_url_requests_auto_resource_type(self):
        config = MediaHostConfig(cloud_name="demo", api_key="k", api_secret="s")
        assert config.upload_url == "https://api.cloudinary.com/v1_1/demo/auto/upload"

    def test_signature(self):
        expected = hashlib.sha1(b"timestamp=1700000000s3cr3t").hexdigest()
        assert sign_upload_params({"timestamp": 1700000000}, "s3cr3t") == expected

    def test_signature_sorts_and_skips_empty(self):
        expected = hashlib.sha1(b"folder=members&timestamp=1s3cr3t").hexdigest()
        params = {"timestamp": 1, "public_id": "", "folder": "members"}
        assert sign_upload_params(params, "s3cr3t") == expected

    @pytest.mark.asyncio
    async def test_upload_sends_signed_form(self):
        mock_client = _mock_client()
        with patch("members_api.media.uploader.get_unix_timestamp", return_value=1700000000):
            with patch("httpx.AsyncClient", return_value=mock_client):
                result = await _uploader().upload(b"abc", "foto.png", "image/png")
        assert result == SECURE_URL
        args, kwargs = mock_client.post.call_args
        assert args[0] == "https://api.cloudinary.com/v1_1/demo/auto/upload"
        assert kwargs["data"] == {
            "timestamp": "1700000000",
            "api_key": "123456",
            "signature": hashlib.sha1(b"timestamp=1700000000s3cr3t").hexdigest(),
        }
        assert kwargs["files"] == {"file": ("foto.png", b"abc", "image/png")}

    @pytest.mark.asyncio
    async def test_upload_none_buffer(self):
        with patch("httpx.AsyncClient") as mock_cls:
            with pytest.raises(MissingFileError):
                await _uploader().upload(None)
        mock_cls.assert_not_called()

    @pytest.mark.asyncio
    async def test_upload_timeout(self):
        mock_client = _mock_client(side_effect=httpx.ReadTimeout("timed out"))
        with patch("httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(UploadError) as exc_info:
                await _uploader().upload(b"abc")
        assert not isinstance(exc_info.value, MissingFileError)

    @pytest.mark.asyncio
    async def test_upload_response_without_secure_url(self):
        mock_client = _mock_client(body={"public_id": "abc"})
        with patch("httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(UploadError):
                await _uploader().upload(b"abc")

    @pytest.mark.asyncio
    async def test_upload_response_not_json(self):
        mock_client = _mock_client(text="<html>bad gateway</html>")
        mock_client.post.return_value.json.side_effect = ValueError("not json")
        with patch("httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(UploadError):
                await _uploader().upload(b"abc")
