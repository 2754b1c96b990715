from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from errors import InvalidRequestError


class StylePreset(str, Enum):
    CORPORATE = "Corporate"
    COLORFUL_SOCIAL = "Colorful Social"
    MINIMALIST = "Minimalist"
    MODERN_DARK = "Modern Dark"
    FRESH_CLEAN = "Fresh & Clean"
    GEOMETRIC = "Geometric"

    @classmethod
    def resolve(cls, value):
        """Look a preset up by value ("Modern Dark") or name ("MODERN_DARK"), ignoring case."""
        if isinstance(value, cls):
            return value
        if value is None or not str(value).strip():
            return cls.CORPORATE
        key = str(value).strip().lower()
        for preset in cls:
            if key in (preset.value.lower(), preset.name.lower()):
                return preset
        raise InvalidRequestError(f"Unknown style: {value}")


@dataclass(frozen=True)
class StyleDescriptor:
    background: str
    title_font: str
    title_size: int
    title_color: str
    insight_title_size: int
    insight_title_color: str
    description_size: int
    description_color: str
    body_font: str = "Inter"
    title_bold: bool = True
    uppercase_title: bool = False
    uppercase_insight_title: bool = False
    gradient_to: Optional[str] = None
    separator: Optional[Tuple[str, int]] = None
    card_fill: Optional[str] = None
    card_radius: int = 0
    icon_fill: Optional[str] = None
    icon_border: Optional[Tuple[str, int]] = None
    icon_radius: int = 0
    icon_round: bool = False


THEMES = {
    StylePreset.CORPORATE: StyleDescriptor(
        background="#f8fafc",
        title_font="Poppins",
        title_size=88,
        title_color="#1e3a8a",
        insight_title_size=44,
        insight_title_color="#1e3a8a",
        description_size=30,
        description_color="#334155",
        uppercase_title=True,
        separator=("#e2e8f0", 2),
        icon_fill="#eff6ff",
        icon_border=("#dbeafe", 2),
        icon_round=True,
    ),
    StylePreset.COLORFUL_SOCIAL: StyleDescriptor(
        background="#6ee7b7",
        gradient_to="#3b82f6",
        title_font="Poppins",
        title_size=100,
        title_color="#ffffff",
        insight_title_size=48,
        insight_title_color="#ffffff",
        description_size=32,
        description_color="#f1f5f9",
        body_font="Poppins",
        card_fill="#ffffff1a",
        card_radius=24,
        icon_radius=16,
    ),
    StylePreset.MINIMALIST: StyleDescriptor(
        background="#ffffff",
        title_font="Source Serif 4",
        title_size=92,
        title_color="#111827",
        insight_title_size=40,
        insight_title_color="#111827",
        description_size=32,
        description_color="#4b5563",
        body_font="Source Serif 4",
        uppercase_insight_title=True,
        separator=("#e5e7eb", 1),
    ),
    StylePreset.MODERN_DARK: StyleDescriptor(
        background="#111827",
        title_font="Poppins",
        title_size=92,
        title_color="#ffffff",
        insight_title_size=44,
        insight_title_color="#22d3ee",
        description_size=30,
        description_color="#d1d5db",
        uppercase_title=True,
        separator=("#374151", 1),
    ),
    StylePreset.FRESH_CLEAN: StyleDescriptor(
        background="#f0fdf4",
        title_font="Poppins",
        title_size=92,
        title_color="#166534",
        insight_title_size=44,
        insight_title_color="#15803d",
        description_size=30,
        description_color="#374151",
        icon_fill="#ffffff",
        icon_border=("#bbf7d0", 2),
        icon_radius=16,
    ),
    StylePreset.GEOMETRIC: StyleDescriptor(
        background="#fffbeb",
        title_font="Poppins",
        title_size=96,
        title_color="#000000",
        insight_title_size=44,
        insight_title_color="#be123c",
        description_size=30,
        description_color="#374151",
        uppercase_title=True,
        icon_fill="#fecdd3",
    ),
}


def get_theme(style):
    return THEMES[StylePreset.resolve(style)]
