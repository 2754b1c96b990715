"""Pillow renderer for the vertical infographic.

Rendering is two-phase: `compose()` lays the content out from data and
marks the canvas ready, `capture()` rasterizes the composed layout.
"""
import io
import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional

from PIL import Image, ImageDraw, ImageFont, ImageOps

from errors import RenderError
from models import parse_data_url
from styles import StylePreset, get_theme

logger = logging.getLogger(__name__)

WIDTH, HEIGHT = 1080, 1920
PAD_X, PAD_Y = 80, 60
HEADER_GAP = 40
ROW_GAP = 30
ROW_PAD = 20
ICON_SIZE = 128
ICON_PAD = 20
TEXT_GAP = 40
LINE_SPACING = 1.25

FALLBACK_FONTS = ["DejaVuSans.ttf", "Arial.ttf", "arial.ttf"]
FALLBACK_BOLD_FONTS = ["DejaVuSans-Bold.ttf", "Arial Bold.ttf", "arialbd.ttf"]


def _font_candidates(family, bold):
    compact = family.replace(" ", "")
    weight = "Bold" if bold else "Regular"
    names = [f"{compact}-{weight}.ttf", f"{family} {weight}.ttf", f"{compact}.ttf"]
    return names + (FALLBACK_BOLD_FONTS if bold else FALLBACK_FONTS)


@lru_cache(maxsize=64)
def load_font(family, size, bold=False, font_dir=""):
    for name in _font_candidates(family, bold):
        path = os.path.join(font_dir, name) if font_dir else name
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            continue
    logger.debug("No TrueType font found for %s, using the default font", family)
    return ImageFont.load_default(size=size)


def wrap_text(draw, text, font, max_width):
    """Greedy word wrap; a word wider than the line gets a line of its own."""
    lines = []
    for paragraph in text.split("\n"):
        current = []
        for word in paragraph.split():
            candidate = " ".join(current + [word])
            if current and draw.textlength(candidate, font=font) > max_width:
                lines.append(" ".join(current))
                current = [word]
            else:
                current.append(word)
        if current:
            lines.append(" ".join(current))
    return lines


def decode_icon(data_url, size):
    """Decode a PNG/JPEG/SVG data URL into an RGBA image that fits `size` x `size`.

    Returns None for an SVG icon when the cairo library is not installed;
    the row is then drawn with an empty icon frame.
    """
    try:
        mime, raw = parse_data_url(data_url)
    except ValueError as e:
        raise RenderError(f"Invalid icon image: {e}") from e

    if mime == "image/svg+xml":
        # cairo is only needed for the built-in vector icons
        try:
            import cairosvg
        except (ImportError, OSError) as e:
            logger.warning("Skipping SVG icon, cairo is not available: %s", e)
            return None
        try:
            raw = cairosvg.svg2png(bytestring=raw, output_width=size, output_height=size)
        except Exception as e:
            raise RenderError(f"Could not rasterize SVG icon: {e}") from e
    try:
        img = Image.open(io.BytesIO(raw)).convert("RGBA")
    except Exception as e:
        raise RenderError(f"Could not decode icon image: {e}") from e
    return ImageOps.contain(img, (size, size))


@dataclass
class TextBlock:
    lines: List[str]
    font: object
    color: str
    line_height: int
    centered: bool = False

    @property
    def height(self):
        return len(self.lines) * self.line_height


@dataclass
class InsightRow:
    top: int
    height: int
    icon: Optional[Image.Image]
    title: TextBlock
    description: Optional[TextBlock] = None


@dataclass
class Layout:
    header: TextBlock
    rows: List[InsightRow] = field(default_factory=list)


class InfographicCanvas:
    """A 1080x1920 infographic for one summary, one style and one icon per insight."""

    def __init__(self, summary, style=StylePreset.CORPORATE, icons=(), scale=1, font_dir=""):
        icons = list(icons)
        if len(icons) != len(summary.insights):
            raise RenderError(
                f"Expected {len(summary.insights)} icons, got {len(icons)}."
            )
        if scale < 1:
            raise RenderError("Render scale must be at least 1.")
        self.summary = summary
        self.style = StylePreset.resolve(style)
        self.theme = get_theme(self.style)
        self.icons = icons
        self.scale = scale
        self.font_dir = font_dir
        self.layout = None

    @property
    def size(self):
        return WIDTH * self.scale, HEIGHT * self.scale

    @property
    def ready(self):
        return self.layout is not None

    def _px(self, value):
        return int(round(value * self.scale))

    def _font(self, family, size, bold):
        return load_font(family, self._px(size), bold, self.font_dir)

    def _text(self, draw, text, family, size, color, width, bold=False, uppercase=False, centered=False):
        font = self._font(family, size, bold)
        if uppercase:
            text = text.upper()
        return TextBlock(
            lines=wrap_text(draw, text, font, width),
            font=font,
            color=color,
            line_height=self._px(size * LINE_SPACING),
            centered=centered,
        )

    def compose(self):
        """Build the layout from data. Must run before `capture()`."""
        t = self.theme
        scratch = ImageDraw.Draw(Image.new("RGB", (1, 1)))
        content_width = self._px(WIDTH - 2 * PAD_X)

        header = self._text(
            scratch, self.summary.title, t.title_font, t.title_size, t.title_color,
            content_width, bold=t.title_bold, uppercase=t.uppercase_title, centered=True,
        )

        icon_box = self._px(ICON_SIZE + 2 * ICON_PAD)
        text_width = content_width - icon_box - self._px(TEXT_GAP)
        top = self._px(PAD_Y) + header.height + self._px(HEADER_GAP)

        rows = []
        for insight, icon_url in zip(self.summary.insights, self.icons):
            title = self._text(
                scratch, insight.title, t.body_font, t.insight_title_size, t.insight_title_color,
                text_width, bold=True, uppercase=t.uppercase_insight_title,
            )
            description = None
            if insight.description:
                description = self._text(
                    scratch, insight.description, t.body_font, t.description_size,
                    t.description_color, text_width,
                )
            text_height = title.height + (description.height if description else 0)
            height = max(icon_box, text_height) + 2 * self._px(ROW_PAD)
            rows.append(InsightRow(
                top=top,
                height=height,
                icon=decode_icon(icon_url, self._px(ICON_SIZE)),
                title=title,
                description=description,
            ))
            top += height + self._px(ROW_GAP)

        self.layout = Layout(header=header, rows=rows)
        return self.layout

    def _background(self):
        t = self.theme
        base = Image.new("RGBA", self.size, t.background)
        if t.gradient_to:
            mask = Image.linear_gradient("L").resize(self.size)
            base = Image.composite(Image.new("RGBA", self.size, t.gradient_to), base, mask)
        return base

    def _draw_text(self, draw, block, x, y, width):
        for line in block.lines:
            dx = 0
            if block.centered:
                dx = max(0, (width - draw.textlength(line, font=block.font)) / 2)
            draw.text((x + dx, y), line, font=block.font, fill=block.color)
            y += block.line_height
        return y

    def _draw_icon_frame(self, draw, box):
        t = self.theme
        outline, border = t.icon_border if t.icon_border else (None, 0)
        if not (t.icon_fill or outline):
            return
        width = self._px(border) if border else 0
        if t.icon_round:
            draw.ellipse(box, fill=t.icon_fill, outline=outline, width=width)
        else:
            draw.rounded_rectangle(box, radius=self._px(t.icon_radius), fill=t.icon_fill,
                                   outline=outline, width=width)

    def capture(self):
        """Rasterize the composed layout into an RGB image."""
        if not self.ready:
            raise RenderError("Infographic has not been composed yet.")
        t = self.theme
        layout = self.layout
        left = self._px(PAD_X)
        right = self.size[0] - self._px(PAD_X)
        content_width = right - left

        image = self._background()

        if t.card_fill:
            overlay = Image.new("RGBA", self.size, (0, 0, 0, 0))
            odraw = ImageDraw.Draw(overlay)
            for row in layout.rows:
                odraw.rounded_rectangle(
                    (left - self._px(ROW_PAD), row.top, right + self._px(ROW_PAD), row.top + row.height),
                    radius=self._px(t.card_radius), fill=t.card_fill,
                )
            image = Image.alpha_composite(image, overlay)

        draw = ImageDraw.Draw(image)
        self._draw_text(draw, layout.header, left, self._px(PAD_Y), content_width)

        icon_box = self._px(ICON_SIZE + 2 * ICON_PAD)
        text_x = left + icon_box + self._px(TEXT_GAP)
        for row in layout.rows:
            if row.top >= self.size[1]:
                logger.warning("Insight rows overflow the canvas; remaining rows are clipped")
                break
            if t.separator:
                color, width = t.separator
                draw.line((left, row.top, right, row.top), fill=color, width=self._px(width))

            box_top = row.top + (row.height - icon_box) // 2
            box = (left, box_top, left + icon_box, box_top + icon_box)
            self._draw_icon_frame(draw, box)
            if row.icon is not None:
                ix = left + (icon_box - row.icon.width) // 2
                iy = box_top + (icon_box - row.icon.height) // 2
                image.alpha_composite(row.icon, (ix, iy))

            text_height = row.title.height + (row.description.height if row.description else 0)
            y = row.top + (row.height - text_height) // 2
            y = self._draw_text(draw, row.title, text_x, y, right - text_x)
            if row.description:
                self._draw_text(draw, row.description, text_x, y, right - text_x)

        return image.convert("RGB")


def render_infographic(summary, style, icons, scale=1, font_dir=""):
    """Compose then capture in one call."""
    canvas = InfographicCanvas(summary, style, icons, scale=scale, font_dir=font_dir)
    canvas.compose()
    return canvas.capture()
