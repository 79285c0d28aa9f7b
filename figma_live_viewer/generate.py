"""
HTML generation from a page subtree through the Gemini REST API.
"""

# Standard Library
import json
import pathlib
import re

# PIP3 modules
import requests

# local repo modules
import figma_live_viewer as flv
import figma_live_viewer.config


GEMINI_API_URL = flv.config.GEMINI_API_URL
DEFAULT_GEMINI_MODEL = flv.config.DEFAULT_GEMINI_MODEL
GENERATION_TIMEOUT = flv.config.GENERATION_TIMEOUT
DEFAULT_PAGE_STEM = flv.config.DEFAULT_PAGE_STEM

PROMPT_HEADER = (
	"Convert the following Figma page node tree into a single self-contained "
	"HTML document with inline CSS. Use absoluteBoundingBox for positions and "
	"sizes, fills for colors, and style for typography. Return only the HTML."
)

FENCE_PATTERN = re.compile(r"^\s*```[A-Za-z]*\s*\n(.*?)\n?```\s*$", re.DOTALL)
UNSAFE_NAME_PATTERN = re.compile(r"[^A-Za-z0-9_\-.]")


class GenerationError(Exception):
	"""
	Raised when the generation service fails or returns no content.
	"""


#============================================
def build_prompt(page_payload: dict) -> str:
	"""
	Build the model prompt for a page.

	Args:
		page_payload: Raw page subtree as received from the files API.

	Returns:
		Prompt text.
	"""
	page_json = json.dumps(page_payload, indent=2, sort_keys=True)
	return f"{PROMPT_HEADER}\n\nFigma page JSON:\n{page_json}\n"


#============================================
def build_generate_url(model: str) -> str:
	return f"{GEMINI_API_URL}/{model}:generateContent"


#============================================
def request_markup(
	session: requests.Session,
	api_key: str,
	model: str,
	prompt: str,
	timeout: float = GENERATION_TIMEOUT,
) -> str:
	"""
	Send a prompt to the model and collect the text of the first candidate.

	Args:
		session: Requests session.
		api_key: Gemini API key.
		model: Model name.
		prompt: Prompt text.
		timeout: Request timeout in seconds.

	Returns:
		Raw model text, empty when the candidate carries no text.

	Raises:
		GenerationError: On request failure, a non-2xx reply or a
			malformed response body.
	"""
	payload = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
	try:
		response = session.post(
			build_generate_url(model),
			params={"key": api_key},
			json=payload,
			timeout=timeout,
		)
		response.raise_for_status()
		result = response.json()
	except requests.RequestException as error:
		raise GenerationError(f"Generation request failed: {error}") from error
	except ValueError as error:
		raise GenerationError(f"Generation response is not JSON: {error}") from error

	candidates = result.get("candidates") if isinstance(result, dict) else None
	if not isinstance(candidates, list) or not candidates:
		raise GenerationError("Generation response has no candidates")
	candidate = candidates[0]
	if not isinstance(candidate, dict):
		raise GenerationError("Generation candidate is not an object")
	content = candidate.get("content")
	if content is None:
		return ""
	if not isinstance(content, dict):
		raise GenerationError("Generation candidate content is not an object")
	parts = content.get("parts")
	if parts is None:
		return ""
	if not isinstance(parts, list):
		raise GenerationError("Generation candidate parts is not a list")
	texts = []
	for part in parts:
		if not isinstance(part, dict):
			raise GenerationError("Generation candidate part is not an object")
		text = part.get("text", "")
		if not isinstance(text, str):
			raise GenerationError("Generation candidate text is not a string")
		texts.append(text)
	return "".join(texts)


#============================================
def extract_markup(text: str) -> str:
	"""
	Strip a surrounding Markdown code fence from model output.

	Args:
		text: Raw model text.

	Returns:
		Markup text.
	"""
	match = FENCE_PATTERN.match(text)
	if match is None:
		return text.strip()
	return match.group(1).strip()


#============================================
def safe_file_stem(name: str | None) -> str:
	"""
	Make a page name safe for use as a file name.

	Args:
		name: Page name.

	Returns:
		Sanitized stem.
	"""
	if not name:
		return DEFAULT_PAGE_STEM
	return UNSAFE_NAME_PATTERN.sub("_", name)


#============================================
def save_markup(output_dir: pathlib.Path, page_name: str | None, markup: str) -> pathlib.Path:
	"""
	Write generated markup to disk.

	Args:
		output_dir: Output directory.
		page_name: Page name for the file stem.
		markup: HTML text.

	Returns:
		Written file path.
	"""
	output_dir.mkdir(parents=True, exist_ok=True)
	path = output_dir / f"{safe_file_stem(page_name)}.html"
	with open(path, "w", encoding="utf-8") as handle:
		handle.write(markup)
	return path


class MarkupGenerator:
	"""
	Bundle a session and credentials for page-to-HTML generation.
	"""

	def __init__(
		self,
		session: requests.Session,
		api_key: str,
		model: str = DEFAULT_GEMINI_MODEL,
		timeout: float = GENERATION_TIMEOUT,
	) -> None:
		self.session = session
		self.api_key = api_key
		self.model = model
		self.timeout = timeout

	#============================================
	def generate(self, page_payload: dict) -> str:
		"""
		Generate HTML for a page subtree.

		Args:
			page_payload: Raw page subtree.

		Returns:
			HTML text, empty when the model answered without content.

		Raises:
			GenerationError: On service failure.
		"""
		prompt = build_prompt(page_payload)
		text = request_markup(self.session, self.api_key, self.model, prompt, self.timeout)
		return extract_markup(text)
