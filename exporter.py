import io

from PIL import Image

from errors import ExportError
from models import parse_data_url

FORMATS = {
    "png": ("image/png", "infographic.png"),
    "pdf": ("application/pdf", "infographic.pdf"),
}


def export_png(image):
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def export_pdf(image):
    """Single page sized to the image: at 72 dpi one pixel is one point."""
    buf = io.BytesIO()
    image.convert("RGB").save(buf, format="PDF", resolution=72.0)
    return buf.getvalue()


def export(image, fmt):
    """Return (bytes, mimetype, download_name) for the requested format."""
    fmt = (fmt or "").lower().strip()
    if fmt not in FORMATS:
        raise ExportError(f"Unsupported export format: {fmt or '(none)'}")
    data = export_png(image) if fmt == "png" else export_pdf(image)
    mime, filename = FORMATS[fmt]
    return data, mime, filename


def image_from_data_url(data_url):
    try:
        _mime, raw = parse_data_url(data_url)
        img = Image.open(io.BytesIO(raw))
        img.load()
    except Exception as e:
        raise ExportError(f"Invalid image data: {e}") from e
    return img
