"""Summarize -> icons -> compose -> capture, driven by one explicit state object."""
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

import gemini_service
from errors import AuthenticationError, InfographicError, InvalidRequestError, MissingCredentialsError
from fallback_icons import get_fallback_icons
from models import SummaryResult
from renderer import InfographicCanvas
from segmenter import segment
from settings import settings as default_settings
from styles import StylePreset

logger = logging.getLogger(__name__)

MODES = ("auto", "ai", "local")
ICON_STRATEGIES = ("per_insight", "grid")


@dataclass
class PipelineState:
    text: str
    style: StylePreset = StylePreset.CORPORATE
    mode: str = "auto"
    api_key: str = ""
    icon_strategy: str = "per_insight"
    step: str = ""
    summary: Optional[SummaryResult] = None
    summary_source: str = ""
    icons: List[str] = field(default_factory=list)
    icon_source: str = ""
    image: object = None
    warnings: List[str] = field(default_factory=list)
    key_rejected: bool = False

    @property
    def use_ai(self):
        if self.mode == "ai":
            return True
        return (self.mode == "auto" and bool(self.api_key) and bool(self.text.strip())
                and not self.key_rejected)


def new_state(text, style=None, mode="auto", api_key=None, icon_strategy="per_insight", settings=None):
    settings = settings or default_settings
    mode = (mode or "auto").lower()
    if mode not in MODES:
        raise InvalidRequestError(f"Unknown mode: {mode}")
    if icon_strategy not in ICON_STRATEGIES:
        raise InvalidRequestError(f"Unknown icon strategy: {icon_strategy}")
    return PipelineState(
        text=text or "",
        style=StylePreset.resolve(style),
        mode=mode,
        api_key=settings.resolve_api_key(api_key),
        icon_strategy=icon_strategy,
    )


def _fallback(state, what, err):
    """In auto mode an AI failure is logged and recorded, anything else propagates."""
    if state.mode != "auto":
        raise err
    logger.warning("%s failed, falling back to local content: %s", what, err)
    state.warnings.append(str(err))
    # a rejected key will be rejected again by the later stages
    if isinstance(err, AuthenticationError):
        state.key_rejected = True


def summarize_step(state, settings=None):
    settings = settings or default_settings
    state.step = "Analyzing text..."
    if state.mode == "ai" and not state.api_key:
        raise MissingCredentialsError()
    if state.use_ai:
        try:
            state.summary = gemini_service.summarize(
                state.text, api_key=state.api_key, model=settings.text_model,
                max_insights=settings.max_insights,
            )
            state.summary_source = "ai"
            return state
        except InfographicError as e:
            _fallback(state, "Summarization", e)
    state.summary = segment(state.text, max_insights=settings.max_insights)
    state.summary_source = "local"
    return state


def icons_step(state, settings=None):
    settings = settings or default_settings
    state.step = "Generating visual assets..."
    insights = state.summary.insights
    if state.use_ai and insights:
        generate = (gemini_service.generate_icon_grid if state.icon_strategy == "grid"
                    else gemini_service.generate_icons)
        try:
            state.icons = generate(insights, state.style, api_key=state.api_key, model=settings.image_model)
            state.icon_source = "ai"
            return state
        except InfographicError as e:
            _fallback(state, "Icon generation", e)
    state.icons = get_fallback_icons(len(insights))
    state.icon_source = "fallback"
    return state


def render_step(state, settings=None):
    settings = settings or default_settings
    state.step = "Composing final infographic..."
    canvas = InfographicCanvas(
        state.summary, state.style, state.icons,
        scale=settings.render_scale, font_dir=settings.font_dir,
    )
    canvas.compose()
    state.image = canvas.capture()
    return state


def run_pipeline(state, settings=None):
    start = time.time()
    for stage in (summarize_step, icons_step, render_step):
        stage(state, settings)
    state.step = ""
    logger.info(
        "Infographic ready in %.1fs (summary=%s, icons=%s, %d insights)",
        time.time() - start, state.summary_source, state.icon_source, len(state.summary.insights),
    )
    return state
