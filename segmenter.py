"""Local, non-AI text segmenter.

Turns a raw block of text into a title plus up to ``max_insights`` short
insights. Pure and total: every string, including an empty one, yields a
valid SummaryResult, so the app always has something to render when the
AI path is unavailable.
"""
import re

from models import InsightRecord, SummaryResult

DEFAULT_TITLE = "Key Insights"
MAX_INSIGHTS = 4
TITLE_WORDS = 6
ELLIPSIS = "..."

PARAGRAPH_BREAK = re.compile(r"\n\s*\n")

PLACEHOLDER = SummaryResult(
    title="Your Title Here",
    insights=(
        InsightRecord("Your First Insight", "Describe your key point here."),
        InsightRecord("Your Second Insight", "Describe your key point here."),
        InsightRecord("Your Third Insight", "Describe your key point here."),
    ),
)


def short_title(paragraph, max_words=TITLE_WORDS):
    words = paragraph.split()
    title = " ".join(words[:max_words])
    if len(words) > max_words:
        title += ELLIPSIS
    return title


def segment(text, max_insights=MAX_INSIGHTS):
    lines = text.strip().split("\n")
    if not any(line.strip() for line in lines):
        return PLACEHOLDER

    first = next(i for i, line in enumerate(lines) if line.strip())
    title = lines[first].strip() or DEFAULT_TITLE
    body = "\n".join(lines[first + 1:]).strip()
    if not body or max_insights <= 0:
        return SummaryResult(title=title)

    paragraphs = [p.strip() for p in PARAGRAPH_BREAK.split(body) if p.strip()]
    body_lines = [line.strip() for line in body.split("\n") if line.strip()]

    # a single multi-line block with no blank lines is a list, one insight per line
    if len(paragraphs) == 1 and len(body_lines) > 1:
        insights = [InsightRecord(line, "") for line in body_lines[:max_insights]]
    else:
        insights = [
            InsightRecord(short_title(p), p) for p in paragraphs[:max_insights]
        ]

    return SummaryResult(title=title, insights=tuple(insights))
