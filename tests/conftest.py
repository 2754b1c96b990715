import io
from types import SimpleNamespace

import pytest
from PIL import Image

from models import to_data_url
from settings import Settings


def png_data_url(color="#ff0000", size=(64, 64)):
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return to_data_url(buf.getvalue(), "image/png")


def png_bytes(color="#ff0000", size=(64, 64)):
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


def text_response(text):
    return SimpleNamespace(text=text, candidates=[])


def image_response(data, mime="image/png"):
    part = SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type=mime))
    content = SimpleNamespace(parts=[part])
    return SimpleNamespace(text=None, candidates=[SimpleNamespace(content=content)])


def empty_image_response():
    part = SimpleNamespace(text="Sorry, no image today.", inline_data=None)
    content = SimpleNamespace(parts=[part])
    return SimpleNamespace(text=part.text, candidates=[SimpleNamespace(content=content)])


class FakeModels:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeClient:
    """Stands in for genai.Client; replays canned responses in order."""

    def __init__(self, *responses):
        self.models = FakeModels(responses)


@pytest.fixture
def test_settings():
    return Settings(
        gemini_api_key="",
        text_model="gemini-2.5-flash",
        image_model="gemini-2.5-flash-image",
        timeout_ms=1000,
        max_insights=4,
        render_scale=1,
        font_dir="",
        port=5001,
        log_level="INFO",
    )
