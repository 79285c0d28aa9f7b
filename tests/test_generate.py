import json
import pathlib

import pytest
import requests

import figma_live_viewer.generate

import fakes


#============================================
def gemini_reply(text: str) -> dict:
	return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


#============================================
def test_build_prompt_embeds_page() -> None:
	prompt = figma_live_viewer.generate.build_prompt({"id": "1:1", "name": "Home"})
	assert prompt.startswith(figma_live_viewer.generate.PROMPT_HEADER)
	payload = json.loads(prompt.split("Figma page JSON:\n", 1)[1])
	assert payload == {"id": "1:1", "name": "Home"}


#============================================
def test_request_markup_posts_prompt() -> None:
	"""
	The prompt goes to generateContent with the key as a query param.
	"""
	session = fakes.FakeSession(fakes.FakeResponse(200, gemini_reply("<html>ok</html>")))
	text = figma_live_viewer.generate.request_markup(session, "key-1", "gemini-test", "prompt")
	assert text == "<html>ok</html>"
	method, url, kwargs = session.calls[0]
	assert method == "POST"
	assert url.endswith("/models/gemini-test:generateContent")
	assert kwargs["params"] == {"key": "key-1"}
	assert kwargs["json"]["contents"][0]["parts"][0]["text"] == "prompt"


#============================================
def test_request_markup_failures() -> None:
	request_markup = figma_live_viewer.generate.request_markup
	GenerationError = figma_live_viewer.generate.GenerationError
	with pytest.raises(GenerationError):
		request_markup(fakes.FakeSession(fakes.FakeResponse(500, {})), "k", "m", "p")
	with pytest.raises(GenerationError):
		request_markup(fakes.FakeSession(error=requests.ConnectionError("down")), "k", "m", "p")
	with pytest.raises(GenerationError):
		request_markup(fakes.FakeSession(fakes.FakeResponse(200, json_error=True)), "k", "m", "p")
	with pytest.raises(GenerationError):
		request_markup(fakes.FakeSession(fakes.FakeResponse(200, {"candidates": []})), "k", "m", "p")


#============================================
def test_extract_markup_strips_fence() -> None:
	extract_markup = figma_live_viewer.generate.extract_markup
	assert extract_markup("```html\n<p>x</p>\n```") == "<p>x</p>"
	assert extract_markup("```\n<p>y</p>```\n") == "<p>y</p>"
	assert extract_markup("  <p>plain</p>\n") == "<p>plain</p>"


#============================================
def test_safe_file_stem() -> None:
	safe_file_stem = figma_live_viewer.generate.safe_file_stem
	assert safe_file_stem("Page 1/Draft") == "Page_1_Draft"
	assert safe_file_stem("ok-name_v1.2") == "ok-name_v1.2"
	assert safe_file_stem("") == "generated-page"
	assert safe_file_stem(None) == "generated-page"


#============================================
def test_generator_markup_saved_to_disk(tmp_path: pathlib.Path) -> None:
	session = fakes.FakeSession(fakes.FakeResponse(200, gemini_reply("```html\n<h1>Home</h1>\n```")))
	generator = figma_live_viewer.generate.MarkupGenerator(session, "k", "m")
	markup = generator.generate({"id": "1", "name": "Home"})
	assert markup == "<h1>Home</h1>"
	path = figma_live_viewer.generate.save_markup(tmp_path / "out", "Home", markup)
	assert path == tmp_path / "out" / "Home.html"
	assert path.read_text(encoding="utf-8") == "<h1>Home</h1>"


#============================================
@pytest.mark.parametrize(
	"body",
	[
		{"candidates": ["not an object"]},
		{"candidates": [{"content": "text"}]},
		{"candidates": [{"content": {"parts": {"text": "x"}}}]},
		{"candidates": [{"content": {"parts": ["x"]}}]},
		{"candidates": [{"content": {"parts": [{"text": 42}]}}]},
		{"candidates": {"0": {}}},
		["not", "an", "object"],
	],
)
def test_request_markup_malformed_body(body: object) -> None:
	session = fakes.FakeSession(fakes.FakeResponse(200, body))
	with pytest.raises(figma_live_viewer.generate.GenerationError):
		figma_live_viewer.generate.request_markup(session, "k", "m", "p")


#============================================
def test_request_markup_empty_candidate() -> None:
	"""
	A well formed reply without text is an empty result, not an error.
	"""
	request_markup = figma_live_viewer.generate.request_markup
	for body in (
		gemini_reply(""),
		{"candidates": [{"content": {"parts": []}}]},
		{"candidates": [{"content": {"role": "model"}}]},
		{"candidates": [{"finishReason": "STOP"}]},
	):
		session = fakes.FakeSession(fakes.FakeResponse(200, body))
		assert request_markup(session, "k", "m", "p") == ""


#============================================
def test_generator_empty_and_failed_stay_distinct() -> None:
	empty_session = fakes.FakeSession(fakes.FakeResponse(200, gemini_reply("```html\n```")))
	generator = figma_live_viewer.generate.MarkupGenerator(empty_session, "k", "m")
	assert generator.generate({"id": "1"}) == ""
	failing_session = fakes.FakeSession(fakes.FakeResponse(503, {}))
	generator = figma_live_viewer.generate.MarkupGenerator(failing_session, "k", "m")
	with pytest.raises(figma_live_viewer.generate.GenerationError):
		generator.generate({"id": "1"})
