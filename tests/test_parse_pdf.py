"""Tests for the /parse-pdf endpoint.

The identity backend is replaced either by overriding the ``require_editor``
dependency or by patching the identity client functions.
"""

import asyncio
import base64
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from sebet.config import IdentityConfig
from sebet.main import app
from sebet.routers.dependencies import require_editor
from sebet.routers.pdf import MAX_PDF_SIZE

client = TestClient(app)

_IDENTITY = IdentityConfig(supabase_url="https://project.supabase.co", service_role_key="service")

_SENTENCE = "Selo Sebet lezi u ravnici i ima dugu i zanimljivu istoriju"
_PDF = (
    "%PDF-1.4\n4 0 obj\n<< /Length 99 >>\nstream\nBT "
    + " ".join(f"({w}) Tj" for w in _SENTENCE.split())
    + " ET\nendstream\nendobj\n%%EOF\n"
).encode("latin-1")


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Clear the slowapi in-memory counter before every test."""
    app.state.limiter._storage.reset()
    yield


@pytest.fixture
def as_editor():
    app.dependency_overrides[require_editor] = lambda: "user-1"
    yield
    app.dependency_overrides.pop(require_editor, None)


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

class TestParsePdf:
    def test_returns_extracted_text(self, as_editor):
        resp = client.post("/parse-pdf", json={"pdfBase64": _b64(_PDF), "fileName": "selo.pdf"})

        assert resp.status_code == 200
        assert resp.json() == {"content": _SENTENCE, "fileName": "selo.pdf"}

    def test_unreadable_pdf_returns_placeholder(self, as_editor):
        resp = client.post("/parse-pdf", json={"pdfBase64": _b64(b"%PDF-1.7 binary"), "fileName": "scan.pdf"})

        assert resp.status_code == 200
        content = resp.json()["content"]
        assert content.startswith("[PDF tekst nije mogao biti u potpunosti ekstrahovan.")
        assert "scan.pdf" in content

    def test_extraction_runs_outside_the_event_loop(self, as_editor):
        seen = []

        def fake_extract(data, file_name):
            try:
                asyncio.get_running_loop()
                seen.append("event loop")
            except RuntimeError:
                seen.append("worker thread")
            return _SENTENCE

        with patch("sebet.routers.pdf.extract_text", new=fake_extract):
            resp = client.post("/parse-pdf", json={"pdfBase64": _b64(_PDF), "fileName": "selo.pdf"})

        assert resp.status_code == 200
        assert seen == ["worker thread"]

    def test_missing_payload_is_rejected(self, as_editor):
        resp = client.post("/parse-pdf", json={"fileName": "x.pdf"})

        assert resp.status_code == 400
        assert resp.json()["detail"] == "PDF sadržaj nije prosleđen"

    def test_invalid_base64_is_rejected(self, as_editor):
        resp = client.post("/parse-pdf", json={"pdfBase64": "not*base64!", "fileName": "x.pdf"})
        assert resp.status_code == 400

    def test_oversized_pdf_is_rejected(self, as_editor):
        payload = _b64(b"0" * (MAX_PDF_SIZE + 1))
        resp = client.post("/parse-pdf", json={"pdfBase64": payload, "fileName": "big.pdf"})
        assert resp.status_code == 413


# ---------------------------------------------------------------------------
# Authorization (delegated to the identity backend)
# ---------------------------------------------------------------------------

class TestParsePdfAuthorization:
    def _post(self, headers=None):
        return client.post(
            "/parse-pdf",
            json={"pdfBase64": _b64(_PDF), "fileName": "selo.pdf"},
            headers=headers or {},
        )

    def test_missing_header_is_401(self):
        resp = self._post()
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Niste prijavljeni"

    def test_unknown_token_is_401(self):
        with (
            patch("sebet.routers.dependencies.get_identity_config", return_value=_IDENTITY),
            patch("sebet.routers.dependencies.get_user_id", new=AsyncMock(return_value=None)),
        ):
            resp = self._post({"Authorization": "Bearer bad"})

        assert resp.status_code == 401
        assert resp.json()["detail"] == "Neovlašćen pristup"

    def test_user_without_role_is_403(self):
        with (
            patch("sebet.routers.dependencies.get_identity_config", return_value=_IDENTITY),
            patch("sebet.routers.dependencies.get_user_id", new=AsyncMock(return_value="u1")),
            patch("sebet.routers.dependencies.has_role", new=AsyncMock(return_value=False)),
        ):
            resp = self._post({"Authorization": "Bearer good"})

        assert resp.status_code == 403

    def test_author_is_allowed(self):
        has_role = AsyncMock(side_effect=lambda config, user_id, role: role == "author")
        get_user_id = AsyncMock(return_value="u1")
        with (
            patch("sebet.routers.dependencies.get_identity_config", return_value=_IDENTITY),
            patch("sebet.routers.dependencies.get_user_id", new=get_user_id),
            patch("sebet.routers.dependencies.has_role", new=has_role),
        ):
            resp = self._post({"Authorization": "Bearer good"})

        assert resp.status_code == 200
        get_user_id.assert_awaited_once_with(_IDENTITY, "good")

    def test_admin_is_allowed(self):
        has_role = AsyncMock(side_effect=lambda config, user_id, role: role == "admin")
        with (
            patch("sebet.routers.dependencies.get_identity_config", return_value=_IDENTITY),
            patch("sebet.routers.dependencies.get_user_id", new=AsyncMock(return_value="u1")),
            patch("sebet.routers.dependencies.has_role", new=has_role),
        ):
            resp = self._post({"Authorization": "Bearer good"})

        assert resp.status_code == 200

    def test_unconfigured_backend_is_503(self):
        with patch("sebet.routers.dependencies.get_identity_config", return_value=None):
            resp = self._post({"Authorization": "Bearer good"})
        assert resp.status_code == 503

    def test_unreachable_backend_is_502(self):
        with (
            patch("sebet.routers.dependencies.get_identity_config", return_value=_IDENTITY),
            patch(
                "sebet.routers.dependencies.get_user_id",
                new=AsyncMock(side_effect=httpx.ConnectError("down")),
            ),
        ):
            resp = self._post({"Authorization": "Bearer good"})
        assert resp.status_code == 502


class TestCors:
    def test_preflight(self):
        resp = client.options(
            "/parse-pdf",
            headers={
                "Origin": "https://schebet-moj.lovable.app",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "authorization, content-type",
            },
        )
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "*"


def test_health_check():
    resp = client.get("/")
    assert resp.status_code == 200
