from styles import StylePreset

SUMMARY_PROMPT = """\
You are an expert content analyst. A user has provided a block of text, likely a transcript from a video or an article.
Your task is to analyze this text and structure it for a vertical infographic.

Based on the provided text, generate:
1. A short, compelling title for the entire text (max 10 words).
2. A list of 3 to 4 of the most important key insights from the text.

For each insight, provide:
- A short, impactful title (3-6 words).
- A brief, one-sentence description summarizing the point.
- A single, simple keyword that represents the insight's core concept (e.g. 'idea', 'growth', 'strategy', 'goal') for icon generation.

Return a JSON object with this exact structure:

{
  "sourceData": { "title": "..." },
  "insights": [
    { "title": "...", "description": "...", "icon_keyword": "..." }
  ]
}

Return ONLY valid JSON, nothing else. No markdown formatting, no explanations.
"""

ICON_PROMPTS = {
    StylePreset.CORPORATE: (
        "A professional, clean, single-color line icon representing '{keyword}'. "
        "The icon should be simple, modern, and suitable for a corporate presentation, "
        "using a blue and gray color palette. White background."
    ),
    StylePreset.COLORFUL_SOCIAL: (
        "A vibrant, colorful, and friendly illustration-style icon for '{keyword}'. "
        "It should be bold, eye-catching, and suitable for social media. "
        "Use a bright, energetic color palette. White background."
    ),
    StylePreset.MINIMALIST: (
        "An elegant, ultra-thin, minimalist line icon for '{keyword}'. "
        "The design should be pure, simple, and use only black or dark gray lines. "
        "Emphasize whitespace and geometric purity. White background."
    ),
    StylePreset.MODERN_DARK: (
        "A modern, professional icon for '{keyword}' for a dark-themed infographic. "
        "Use a bright, single accent color (like teal or cyan) on a transparent background. "
        "The style should be clean, thin lines."
    ),
    StylePreset.FRESH_CLEAN: (
        "A friendly, simple, filled-shape icon representing '{keyword}'. "
        "Use a soft and fresh color palette (like light green, sky blue). "
        "The style should be clean and approachable. White background."
    ),
    StylePreset.GEOMETRIC: (
        "A bold, geometric icon for '{keyword}'. The design should be constructed from simple shapes "
        "(circles, squares, triangles) and use a vibrant, high-contrast color palette. White background."
    ),
}

ICON_SUFFIX = """
Do NOT render ANY text, letters, words, labels or captions in the image. Only the icon drawing.
"""

GRID_PROMPT = """\
Generate a square image containing a 2x2 grid of icons.
The grid MUST always have exactly 4 equal-sized cells (2 columns, 2 rows), filled left to right, top to bottom.
If fewer than 4 icons are described, leave the remaining cells empty.
Do NOT draw any grid lines, borders, gutters, or separators between cells: the image will be programmatically cropped into 4 equal parts.

Every icon follows this style:
{style}

The icons should represent:

"""
