import io
import json
import logging
import time

from PIL import Image
from google import genai
from google.genai import errors, types
from google.genai.types import Modality

from errors import (
    AIServiceError,
    AuthenticationError,
    InvalidRequestError,
    MalformedResponseError,
    MissingCredentialsError,
)
from models import SummaryResult, to_data_url
from settings import settings
from styles import StylePreset
from system_prompt import GRID_PROMPT, ICON_PROMPTS, ICON_SUFFIX, SUMMARY_PROMPT

logger = logging.getLogger(__name__)

GRID_SIZE = 2

SUMMARY_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "sourceData": types.Schema(
            type=types.Type.OBJECT,
            properties={
                "title": types.Schema(
                    type=types.Type.STRING,
                    description="A short, compelling title for the entire text.",
                ),
            },
            required=["title"],
        ),
        "insights": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "title": types.Schema(
                        type=types.Type.STRING,
                        description="A short, impactful title (3-6 words).",
                    ),
                    "description": types.Schema(
                        type=types.Type.STRING,
                        description="A brief, one-sentence summary of the point.",
                    ),
                    "icon_keyword": types.Schema(
                        type=types.Type.STRING,
                        description="A single keyword representing the insight's core concept.",
                    ),
                },
                required=["title", "description", "icon_keyword"],
            ),
        ),
    },
    required=["sourceData", "insights"],
)


def make_client(api_key, timeout_ms=None):
    if not api_key:
        raise MissingCredentialsError()
    return genai.Client(
        api_key=api_key,
        http_options=types.HttpOptions(timeout=timeout_ms or settings.timeout_ms),
    )


def _is_auth_failure(err):
    return err.code in (401, 403) or "API_KEY_INVALID" in str(err)


def _generate(client, what, **kwargs):
    """Run one generate_content call, translating provider failures into app errors."""
    try:
        return client.models.generate_content(**kwargs)
    except errors.APIError as e:
        if _is_auth_failure(e):
            raise AuthenticationError(f"Gemini rejected the API key: {e}") from e
        raise AIServiceError(f"Failed to {what}: {e}") from e
    except Exception as e:
        # httpx transport errors and timeouts surface here
        raise AIServiceError(f"Failed to {what}: {e}") from e


def summarize(text, api_key=None, model=None, max_insights=None, client=None):
    """Ask Gemini for a title plus 3-4 insights (title, description, icon keyword)."""
    if not text or not text.strip():
        raise InvalidRequestError("Text to summarize is required.")
    client = client or make_client(api_key)
    model = model or settings.text_model
    max_insights = settings.max_insights if max_insights is None else max_insights

    config = types.GenerateContentConfig(
        system_instruction=SUMMARY_PROMPT,
        response_mime_type="application/json",
        response_schema=SUMMARY_SCHEMA,
    )

    start = time.time()
    response = _generate(
        client, "analyze text",
        model=model,
        contents=f"TEXT TO ANALYZE:\n\n{text.strip()}",
        config=config,
    )
    logger.info("Summarized %d chars with %s in %.1fs", len(text), model, time.time() - start)

    try:
        data = json.loads((response.text or "").strip())
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedResponseError(f"Failed to analyze text: response was not valid JSON ({e})") from e

    if not isinstance(data, dict) or not data.get("sourceData") or not isinstance(data.get("insights"), list):
        raise MalformedResponseError("Invalid response format from Gemini API.")

    try:
        return SummaryResult.from_dict(data, max_insights=max_insights)
    except TypeError as e:
        raise MalformedResponseError(f"Invalid response format from Gemini API: {e}") from e


def _image_from_response(response):
    """Return (bytes, mime) of the first inline image part, or None."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates or candidates[0].content is None:
        return None
    for part in candidates[0].content.parts or []:
        if part.inline_data and part.inline_data.data:
            return part.inline_data.data, part.inline_data.mime_type or "image/png"
    return None


def icon_prompt(insight, style):
    template = ICON_PROMPTS[StylePreset.resolve(style)]
    keyword = insight.keyword or insight.title
    return template.replace("{keyword}", keyword) + ICON_SUFFIX


def generate_icons(insights, style, api_key=None, model=None, client=None):
    """One image per insight, requested one after another, same order as `insights`."""
    if not insights:
        return []
    client = client or make_client(api_key)
    model = model or settings.image_model
    config = types.GenerateContentConfig(
        response_modalities=[Modality.TEXT, Modality.IMAGE],
        temperature=0,
    )

    icons = []
    for i, insight in enumerate(insights, 1):
        start = time.time()
        response = _generate(
            client, f"generate icon {i}",
            model=model,
            contents=icon_prompt(insight, style),
            config=config,
        )
        image = _image_from_response(response)
        if image is None:
            raise MalformedResponseError(
                f"AI did not return an image for icon {i} ({insight.keyword or insight.title})."
            )
        raw_bytes, mime = image
        icons.append(to_data_url(raw_bytes, mime))
        logger.info("Icon %d/%d generated in %.1fs", i, len(insights), time.time() - start)
    return icons


def crop_grid(png_bytes, count, size=GRID_SIZE):
    """Split a size x size grid image into `count` PNG data URLs, row by row."""
    img = Image.open(io.BytesIO(png_bytes))
    w, h = img.size
    cw, ch = w / size, h / size

    icons = []
    for row in range(size):
        for col in range(size):
            if len(icons) == count:
                return icons
            box = (round(col * cw), round(row * ch),
                   round((col + 1) * cw), round((row + 1) * ch))
            cropped = img.crop(box)
            buf = io.BytesIO()
            cropped.save(buf, format="PNG")
            icons.append(to_data_url(buf.getvalue(), "image/png"))
    return icons


def generate_icon_grid(insights, style, api_key=None, model=None, client=None):
    """Single request for a 2x2 grid image, cropped into one icon per insight."""
    if not insights:
        return []
    if len(insights) > GRID_SIZE * GRID_SIZE:
        raise InvalidRequestError(f"Grid strategy supports at most {GRID_SIZE * GRID_SIZE} icons.")
    client = client or make_client(api_key)
    model = model or settings.image_model

    style_line = ICON_PROMPTS[StylePreset.resolve(style)].replace("'{keyword}'", "the concept described")
    prompt = GRID_PROMPT.format(style=style_line)
    for i, insight in enumerate(insights, 1):
        prompt += f"{i}. {insight.keyword or insight.title}: {insight.title}\n"
    prompt += ICON_SUFFIX

    response = _generate(
        client, "generate icon grid",
        model=model,
        contents=prompt,
        config=types.GenerateContentConfig(
            response_modalities=[Modality.TEXT, Modality.IMAGE],
            temperature=0,
        ),
    )
    image = _image_from_response(response)
    if image is None:
        raise MalformedResponseError("AI did not return an image for the icon grid.")

    try:
        return crop_grid(image[0], len(insights))
    except Exception as e:
        raise MalformedResponseError(f"Could not read the icon grid image: {e}") from e
