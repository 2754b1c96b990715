import io
import logging
import time

from flask import Flask, jsonify, request, send_file
from werkzeug.exceptions import HTTPException

from errors import InfographicError, InvalidRequestError, MissingCredentialsError
from exporter import export, image_from_data_url
from fallback_icons import get_fallback_icons
from models import SummaryResult, to_data_url
from pipeline import icons_step, new_state, run_pipeline, summarize_step
from renderer import render_infographic
from settings import settings
from styles import StylePreset

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = Flask(__name__)


def _payload():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidRequestError("Request body must be a JSON object")
    return data


def _summary_from(data):
    raw = data.get("summary")
    if raw is None:
        raise InvalidRequestError("No summary provided")
    try:
        return SummaryResult.from_dict(raw, max_insights=settings.max_insights)
    except TypeError as e:
        raise InvalidRequestError(f"Invalid summary: {e}") from e


@app.errorhandler(InfographicError)
def handle_infographic_error(e):
    if e.status_code >= 500:
        logger.error("%s: %s", type(e).__name__, e)
    else:
        logger.info("Rejected request to %s: %s", request.path, e)
    return jsonify({"error": str(e)}), e.status_code


@app.errorhandler(Exception)
def handle_unexpected_error(e):
    if isinstance(e, HTTPException):
        return e
    logger.exception("Unhandled error on %s", request.path)
    return jsonify({"error": str(e)}), 500


@app.route("/")
def index():
    return HTML_PAGE


@app.route("/api/styles")
def styles():
    return jsonify({"styles": [s.value for s in StylePreset]})


@app.route("/api/summarize", methods=["POST"])
def summarize():
    data = _payload()
    state = new_state(
        str(data.get("text") or ""),
        mode=data.get("mode", "auto"),
        api_key=data.get("api_key"),
    )
    if state.mode == "ai" and not state.text.strip():
        return jsonify({"error": "Text cannot be empty"}), 400

    start = time.time()
    summarize_step(state)
    elapsed = round(time.time() - start, 1)
    return jsonify({
        "summary": state.summary.to_dict(),
        "source": state.summary_source,
        "warnings": state.warnings,
        "elapsed": elapsed,
    })


@app.route("/api/icons", methods=["POST"])
def icons():
    data = _payload()
    summary = _summary_from(data)
    # the summary stands in for the source text
    text = "\n".join([summary.title] + [i.title for i in summary.insights])
    state = new_state(
        text,
        style=data.get("style"),
        mode=data.get("mode", "local"),
        api_key=data.get("api_key"),
        icon_strategy=data.get("strategy", "per_insight"),
    )
    state.summary = summary
    if state.mode == "ai" and not state.api_key:
        raise MissingCredentialsError()

    start = time.time()
    icons_step(state)
    elapsed = round(time.time() - start, 1)
    return jsonify({
        "icons": state.icons,
        "source": state.icon_source,
        "warnings": state.warnings,
        "elapsed": elapsed,
    })


@app.route("/api/render", methods=["POST"])
def render():
    data = _payload()
    summary = _summary_from(data)
    icons = data.get("icons")
    if icons is None:
        icons = get_fallback_icons(len(summary.insights))

    start = time.time()
    image = render_infographic(
        summary, data.get("style"), icons,
        scale=settings.render_scale, font_dir=settings.font_dir,
    )
    png, mime, _name = export(image, "png")
    elapsed = round(time.time() - start, 2)
    return jsonify({"image": to_data_url(png, mime), "elapsed": elapsed})


@app.route("/api/generate", methods=["POST"])
def generate():
    data = _payload()
    text = str(data.get("text") or "")
    if not text.strip():
        return jsonify({"error": "Text cannot be empty"}), 400

    state = new_state(
        text,
        style=data.get("style"),
        mode=data.get("mode", "auto"),
        api_key=data.get("api_key"),
        icon_strategy=data.get("strategy", "per_insight"),
    )
    start = time.time()
    run_pipeline(state)
    png, mime, _name = export(state.image, "png")
    elapsed = round(time.time() - start, 1)
    return jsonify({
        "image": to_data_url(png, mime),
        "summary": state.summary.to_dict(),
        "source": {"summary": state.summary_source, "icons": state.icon_source},
        "warnings": state.warnings,
        "elapsed": elapsed,
    })


@app.route("/api/export", methods=["POST"])
def export_image():
    data = _payload()
    image_data = data.get("image", "")
    if not image_data:
        return jsonify({"error": "No image provided"}), 400

    image = image_from_data_url(image_data)
    payload, mime, filename = export(image, data.get("format", "png"))
    return send_file(io.BytesIO(payload), mimetype=mime, as_attachment=True, download_name=filename)


HTML_PAGE = r"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Infographic Generator</title>
<style>
  *, *::before, *::after { box-sizing: border-box; margin: 0; padding: 0; }

  body {
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
    background: #0f0f0f;
    color: #e0e0e0;
    min-height: 100vh;
  }

  .split-layout { display: flex; min-height: 100vh; }
  .panel { flex: 1; display: flex; flex-direction: column; padding: 24px; gap: 16px; }
  .divider { width: 1px; background: #1e1e1e; flex-shrink: 0; }

  h1 { font-size: 1.3rem; font-weight: 600; color: #fff; }
  h1 span { color: #8b5cf6; }
  label { font-size: 0.78rem; color: #888; }

  textarea, input, select {
    width: 100%;
    background: #1a1a1a;
    color: #e0e0e0;
    border: 1px solid #2a2a2a;
    border-radius: 8px;
    padding: 10px 12px;
    font-size: 0.88rem;
    font-family: inherit;
    outline: none;
    transition: border-color 0.2s;
  }
  textarea { min-height: 240px; resize: vertical; line-height: 1.5; }
  textarea:focus, input:focus, select:focus { border-color: #8b5cf6; }

  .controls { display: flex; gap: 10px; }

  button {
    background: #8b5cf6;
    color: #fff;
    border: none;
    border-radius: 8px;
    padding: 10px 20px;
    font-size: 0.85rem;
    font-weight: 500;
    cursor: pointer;
    transition: background 0.2s, opacity 0.2s;
  }
  button:hover { background: #7c3aed; }
  button:disabled { opacity: 0.5; cursor: not-allowed; }
  button.secondary { background: #232323; color: #aaa; border: 1px solid #333; }

  .status { font-size: 0.78rem; color: #888; min-height: 1.2em; }
  .status.error { color: #fca5a5; }

  .preview {
    width: 100%;
    max-width: 420px;
    aspect-ratio: 9 / 16;
    margin: 0 auto;
    background: #1a1a1a;
    border: 1px solid #2a2a2a;
    border-radius: 10px;
    display: flex;
    align-items: center;
    justify-content: center;
    overflow: hidden;
    color: #555;
  }
  .preview img { width: 100%; height: 100%; object-fit: contain; }
  .downloads { display: none; justify-content: center; gap: 10px; }
  .downloads.visible { display: flex; }
</style>
</head>
<body>
<div class="split-layout">
  <div class="panel">
    <h1>Infographic <span>Generator</span></h1>
    <label for="text">1. Paste transcript or text</label>
    <textarea id="text" placeholder="Paste the full text you want to summarize here..."></textarea>
    <label for="apiKey">2. Gemini API key (optional, local summary without it)</label>
    <input id="apiKey" type="password" placeholder="Enter your API key here">
    <label for="style">3. Choose a style</label>
    <div class="controls">
      <select id="style"></select>
      <select id="mode">
        <option value="auto">Auto</option>
        <option value="ai">AI only</option>
        <option value="local">Local only</option>
      </select>
    </div>
    <button id="generateBtn" onclick="generate()">Generate Infographic</button>
    <div class="status" id="status"></div>
  </div>
  <div class="divider"></div>
  <div class="panel">
    <div class="preview" id="preview">Your infographic will appear here</div>
    <div class="downloads" id="downloads">
      <button class="secondary" onclick="download('png')">Download PNG</button>
      <button class="secondary" onclick="download('pdf')">Download PDF</button>
    </div>
  </div>
</div>
<script>
  let generatedImage = null;
  const $ = (id) => document.getElementById(id);

  async function loadStyles() {
    const res = await fetch('/api/styles');
    const data = await res.json();
    $('style').innerHTML = data.styles.map(s => `<option value="${s}">${s}</option>`).join('');
  }

  function setStatus(msg, isError) {
    $('status').textContent = msg;
    $('status').classList.toggle('error', !!isError);
  }

  async function generate() {
    const text = $('text').value;
    if (!text.trim()) { setStatus('Please provide the transcript/text.', true); return; }
    $('generateBtn').disabled = true;
    $('downloads').classList.remove('visible');
    setStatus('Generating...');
    const started = Date.now();
    try {
      const res = await fetch('/api/generate', {
        method: 'POST',
        headers: { 'Content-Type': 'application/json' },
        body: JSON.stringify({
          text, style: $('style').value, mode: $('mode').value, api_key: $('apiKey').value,
        }),
      });
      const data = await res.json();
      if (!res.ok) throw new Error(data.error || 'An unknown error occurred.');
      generatedImage = data.image;
      $('preview').innerHTML = `<img src="${data.image}" alt="Generated Infographic">`;
      $('downloads').classList.add('visible');
      const secs = ((Date.now() - started) / 1000).toFixed(1);
      const note = data.warnings.length ? ` (fallback used: ${data.warnings.join('; ')})` : '';
      setStatus(`Done in ${secs}s${note}`);
    } catch (err) {
      setStatus(err.message, true);
    } finally {
      $('generateBtn').disabled = false;
    }
  }

  async function download(format) {
    if (!generatedImage) return;
    const res = await fetch('/api/export', {
      method: 'POST',
      headers: { 'Content-Type': 'application/json' },
      body: JSON.stringify({ image: generatedImage, format }),
    });
    if (!res.ok) { setStatus((await res.json()).error, true); return; }
    const blob = await res.blob();
    const a = document.createElement('a');
    a.href = URL.createObjectURL(blob);
    a.download = `infographic.${format}`;
    a.click();
    URL.revokeObjectURL(a.href);
  }

  loadStyles();
</script>
</body>
</html>
"""

if __name__ == "__main__":
    app.run(debug=True, port=settings.port, threaded=True)
