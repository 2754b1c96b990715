import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


TEXT_MODELS = [
    "gemini-2.5-flash",
    "gemini-2.5-pro",
    "gemini-3-flash-preview",
    "gemini-3-pro-preview",
]

IMAGE_MODELS = [
    "gemini-2.5-flash-image",
    "gemini-3.1-flash-image-preview",
]


def _env_int(name, default):
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


@dataclass
class Settings:
    """Application configuration values loaded from environment variables."""
    gemini_api_key: str = field(default_factory=lambda: os.getenv("GEMINI_API_KEY", ""))
    text_model: str = field(default_factory=lambda: os.getenv("GEMINI_TEXT_MODEL", TEXT_MODELS[0]))
    image_model: str = field(default_factory=lambda: os.getenv("GEMINI_IMAGE_MODEL", IMAGE_MODELS[0]))
    timeout_ms: int = field(default_factory=lambda: _env_int("GEMINI_TIMEOUT_MS", 300_000))
    max_insights: int = field(default_factory=lambda: _env_int("MAX_INSIGHTS", 4))
    render_scale: int = field(default_factory=lambda: _env_int("RENDER_SCALE", 2))
    font_dir: str = field(default_factory=lambda: os.getenv("FONT_DIR", ""))
    port: int = field(default_factory=lambda: _env_int("PORT", 5001))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    def resolve_api_key(self, override=None):
        """A key sent with the request wins over the one in the environment."""
        if override and override.strip():
            return override.strip()
        return self.gemini_api_key


settings = Settings()
