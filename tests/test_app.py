import io
import json
import logging
import sys
from types import SimpleNamespace

import pytest
from PIL import Image

import app as app_module
import gemini_service
import pipeline
from errors import AIServiceError
from models import InsightRecord, SummaryResult, parse_data_url, to_data_url

from conftest import png_data_url

TEXT = "Focus Habits\n\nBatch similar tasks together.\n\nProtect blocks of deep work."


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(app_module.settings, "gemini_api_key", "")
    monkeypatch.setattr(app_module.settings, "render_scale", 1)
    png_icons = lambda n: [png_data_url()] * max(n, 0)  # noqa: E731
    monkeypatch.setattr(pipeline, "get_fallback_icons", png_icons)
    monkeypatch.setattr(app_module, "get_fallback_icons", png_icons)
    app_module.app.config["TESTING"] = True
    with app_module.app.test_client() as c:
        yield c


def _image(data_url):
    _mime, raw = parse_data_url(data_url)
    return Image.open(io.BytesIO(raw))


class TestPages:
    def test_index(self, client):
        res = client.get("/")
        assert res.status_code == 200
        assert b"Generate Infographic" in res.data

    def test_styles(self, client):
        res = client.get("/api/styles")
        assert res.get_json()["styles"][0] == "Corporate"
        assert "Fresh & Clean" in res.get_json()["styles"]


class TestSummarize:
    def test_local(self, client):
        res = client.post("/api/summarize", json={"text": TEXT, "mode": "local"})
        body = res.get_json()
        assert res.status_code == 200
        assert body["source"] == "local"
        assert body["summary"]["sourceData"]["title"] == "Focus Habits"
        assert len(body["summary"]["insights"]) == 2
        assert body["summary"]["insights"][0]["icon_keyword"] == ""

    def test_auto_without_key_is_local(self, client):
        res = client.post("/api/summarize", json={"text": ""})
        assert res.get_json()["summary"]["sourceData"]["title"] == "Your Title Here"

    def test_ai_without_key(self, client):
        res = client.post("/api/summarize", json={"text": TEXT, "mode": "ai"})
        assert res.status_code == 401
        assert "API key" in res.get_json()["error"]

    def test_ai_empty_text(self, client):
        res = client.post("/api/summarize", json={"text": " ", "mode": "ai", "api_key": "k"})
        assert res.status_code == 400

    def test_not_json(self, client):
        res = client.post("/api/summarize", data="hello", content_type="text/plain")
        assert res.status_code == 400

    def test_ai_failure_in_auto_mode_falls_back(self, client, monkeypatch):
        def fail(*args, **kwargs):
            raise AIServiceError("Failed to analyze text: timeout")

        monkeypatch.setattr(gemini_service, "summarize", fail)
        res = client.post("/api/summarize", json={"text": TEXT, "api_key": "k"})
        body = res.get_json()
        assert body["source"] == "local"
        assert body["warnings"] == ["Failed to analyze text: timeout"]


class TestIcons:
    summary = {"sourceData": {"title": "T"}, "insights": [
        {"title": "a", "description": "", "icon_keyword": "x"},
        {"title": "b", "description": "", "icon_keyword": "y"},
    ]}

    def test_local_icons(self, client):
        res = client.post("/api/icons", json={"summary": self.summary})
        body = res.get_json()
        assert body["source"] == "fallback"
        assert len(body["icons"]) == 2

    def test_ai_icons(self, client, monkeypatch):
        seen = {}

        def fake(insights, style, api_key=None, **kw):
            seen.update(keywords=[i.keyword for i in insights], style=style.value, key=api_key)
            return ["data:image/png;base64,AAAA"] * len(insights)

        monkeypatch.setattr(gemini_service, "generate_icons", fake)
        res = client.post("/api/icons", json={
            "summary": self.summary, "mode": "ai", "style": "Modern Dark", "api_key": "k",
        })
        assert res.status_code == 200
        assert res.get_json()["source"] == "ai"
        assert seen == {"keywords": ["x", "y"], "style": "Modern Dark", "key": "k"}

    def test_ai_icons_without_key(self, client):
        res = client.post("/api/icons", json={"summary": self.summary, "mode": "ai"})
        assert res.status_code == 401

    def test_auto_without_key_uses_fallback(self, client):
        res = client.post("/api/icons", json={"summary": self.summary, "mode": "auto"})
        assert res.get_json()["source"] == "fallback"

    def test_ai_failure_in_auto_mode_falls_back(self, client, monkeypatch):
        def fail(*args, **kwargs):
            raise AIServiceError("Failed to generate icon 1: timeout")

        monkeypatch.setattr(gemini_service, "generate_icons", fail)
        res = client.post("/api/icons", json={"summary": self.summary, "mode": "auto", "api_key": "k"})
        body = res.get_json()
        assert res.status_code == 200
        assert body["source"] == "fallback"
        assert len(body["icons"]) == 2
        assert body["warnings"] == ["Failed to generate icon 1: timeout"]

    def test_ai_failure_in_ai_mode_is_reported(self, client, monkeypatch):
        def fail(*args, **kwargs):
            raise AIServiceError("Failed to generate icon 1: timeout")

        monkeypatch.setattr(gemini_service, "generate_icons", fail)
        res = client.post("/api/icons", json={"summary": self.summary, "mode": "ai", "api_key": "k"})
        assert res.status_code == 502
        assert res.get_json()["error"] == "Failed to generate icon 1: timeout"

    def test_unknown_strategy(self, client):
        res = client.post("/api/icons", json={"summary": self.summary, "mode": "ai", "strategy": "mosaic"})
        assert res.status_code == 400

    def test_missing_summary(self, client):
        assert client.post("/api/icons", json={}).status_code == 400


class TestRender:
    def test_render(self, client):
        summary = SummaryResult("T", (InsightRecord("a", "b"),)).to_dict()
        res = client.post("/api/render", json={
            "summary": summary, "style": "Geometric", "icons": [png_data_url()],
        })
        assert res.status_code == 200
        assert _image(res.get_json()["image"]).size == (1080, 1920)

    def test_icon_mismatch(self, client):
        summary = SummaryResult("T", (InsightRecord("a", "b"),)).to_dict()
        res = client.post("/api/render", json={"summary": summary, "icons": []})
        assert res.status_code == 500
        assert "Expected 1 icons" in res.get_json()["error"]

    def test_unknown_style(self, client):
        summary = SummaryResult("T", ()).to_dict()
        res = client.post("/api/render", json={"summary": summary, "style": "Baroque", "icons": []})
        assert res.status_code == 400

    def test_malformed_svg_icon(self, client, monkeypatch):
        def svg2png(**kwargs):
            raise ValueError("syntax error: line 1, column 0")

        monkeypatch.setitem(sys.modules, "cairosvg", SimpleNamespace(svg2png=svg2png))
        summary = SummaryResult("T", (InsightRecord("a", "b"),)).to_dict()
        icon = to_data_url(b"not xml", "image/svg+xml")
        res = client.post("/api/render", json={"summary": summary, "icons": [icon]})
        assert res.status_code == 500
        assert res.get_json()["error"].startswith("Could not rasterize SVG icon")


class TestUnexpectedErrors:
    def test_json_500_and_logged(self, client, monkeypatch, caplog):
        def boom(*args, **kwargs):
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(app_module, "render_infographic", boom)
        summary = SummaryResult("T", ()).to_dict()
        with caplog.at_level(logging.ERROR, logger="app"):
            res = client.post("/api/render", json={"summary": summary, "icons": []})
        assert res.status_code == 500
        assert res.get_json() == {"error": "disk on fire"}
        assert any(r.exc_info and "/api/render" in r.getMessage() for r in caplog.records)

    def test_http_errors_keep_their_status(self, client):
        assert client.get("/missing").status_code == 404
        assert client.get("/api/generate").status_code == 405


class TestGenerate:
    def test_local_pipeline(self, client):
        res = client.post("/api/generate", json={"text": TEXT, "style": "Minimalist"})
        body = res.get_json()
        assert res.status_code == 200
        assert body["source"] == {"summary": "local", "icons": "fallback"}
        assert body["warnings"] == []
        assert _image(body["image"]).size == (1080, 1920)

    def test_empty_text(self, client):
        res = client.post("/api/generate", json={"text": "  "})
        assert res.status_code == 400
        assert res.get_json()["error"] == "Text cannot be empty"

    def test_bad_mode(self, client):
        res = client.post("/api/generate", json={"text": TEXT, "mode": "cloud"})
        assert res.status_code == 400

    def test_builtin_icons_without_key(self, monkeypatch):
        monkeypatch.setattr(app_module.settings, "gemini_api_key", "")
        monkeypatch.setattr(app_module.settings, "render_scale", 1)
        app_module.app.config["TESTING"] = True
        with app_module.app.test_client() as c:
            res = c.post("/api/generate", json={"text": TEXT})
        body = res.get_json()
        assert res.status_code == 200
        assert body["source"] == {"summary": "local", "icons": "fallback"}
        assert _image(body["image"]).size == (1080, 1920)


class TestExport:
    def test_png(self, client):
        res = client.post("/api/export", json={"image": png_data_url(size=(30, 40)), "format": "png"})
        assert res.status_code == 200
        assert res.mimetype == "image/png"
        assert "infographic.png" in res.headers["Content-Disposition"]
        assert Image.open(io.BytesIO(res.data)).size == (30, 40)

    def test_pdf(self, client):
        res = client.post("/api/export", json={"image": png_data_url(), "format": "pdf"})
        assert res.mimetype == "application/pdf"
        assert res.data.startswith(b"%PDF")
        assert "infographic.pdf" in res.headers["Content-Disposition"]

    def test_unknown_format(self, client):
        res = client.post("/api/export", json={"image": png_data_url(), "format": "tiff"})
        assert res.status_code == 400
        assert json.loads(res.data)["error"].startswith("Unsupported export format")

    def test_missing_image(self, client):
        assert client.post("/api/export", json={"format": "png"}).status_code == 400
