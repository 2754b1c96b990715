import base64
from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class InsightRecord:
    title: str
    description: str
    keyword: str = ""

    def to_dict(self):
        return {
            "title": self.title,
            "description": self.description,
            "icon_keyword": self.keyword,
        }

    @classmethod
    def from_dict(cls, data):
        keyword = data.get("icon_keyword", data.get("keyword", ""))
        return cls(
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            keyword=str(keyword or ""),
        )


@dataclass(frozen=True)
class SummaryResult:
    title: str
    insights: Tuple[InsightRecord, ...] = field(default_factory=tuple)

    def to_dict(self):
        return {
            "sourceData": {"title": self.title},
            "insights": [i.to_dict() for i in self.insights],
        }

    @classmethod
    def from_dict(cls, data, max_insights=None):
        """Accepts {"sourceData": {"title"}, "insights"} or a flat {"title", "insights"}."""
        if not isinstance(data, dict):
            raise TypeError("summary must be a JSON object")
        source = data.get("sourceData")
        title = source.get("title") if isinstance(source, dict) else data.get("title")
        raw = data.get("insights") or []
        if not isinstance(raw, list):
            raise TypeError("insights must be a list")
        insights = tuple(InsightRecord.from_dict(i) for i in raw if isinstance(i, dict))
        if max_insights is not None:
            insights = insights[:max_insights]
        return cls(title=str(title or ""), insights=insights)


def to_data_url(raw_bytes, mime="image/png"):
    b64 = base64.b64encode(raw_bytes).decode("utf-8")
    return f"data:{mime};base64,{b64}"


def parse_data_url(data_url):
    """Split a base64 data URL into (mime, bytes). Raises ValueError on anything else."""
    if not isinstance(data_url, str) or not data_url.startswith("data:"):
        raise ValueError("not a data URL")
    header, b64 = data_url.split(",", 1)
    if not header.endswith(";base64"):
        raise ValueError("data URL is not base64 encoded")
    mime = header.split(":")[1].split(";")[0] or "application/octet-stream"
    return mime, base64.b64decode(b64, validate=True)
