"""
Shared configuration and constants.
"""

# Standard Library
import dataclasses
import os
import pathlib


DEFAULT_VIEWPORT_WIDTH = 900.0
DEFAULT_VIEWPORT_HEIGHT = 600.0

DEFAULT_FONT_FAMILY = "sans-serif"
DEFAULT_FONT_SIZE = 16.0
DEFAULT_TEXT_COLOR = (34, 34, 34, 1.0)
DEFAULT_BORDER_COLOR = (204, 204, 204, 1.0)
BORDER_WIDTH = 1.0
TEXT_LEADING = 1.2

PDF_FONT_REGULAR = "Helvetica"
PNG_BACKGROUND = (255, 255, 255, 255)

FIGMA_API_URL = "https://api.figma.com/v1/files"
FIGMA_TIMEOUT = 30.0
POLL_INTERVAL = 10.0
SUBSCRIBER_QUEUE_SIZE = 8

GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta/models"
DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"
GENERATION_TIMEOUT = 120.0
DEFAULT_PAGE_STEM = "generated-page"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
DEFAULT_OUTPUT_DIR = "generated"


@dataclasses.dataclass(frozen=True)
class ViewportConfig:
	width: float = DEFAULT_VIEWPORT_WIDTH
	height: float = DEFAULT_VIEWPORT_HEIGHT


@dataclasses.dataclass
class ServiceConfig:
	figma_token: str
	file_key: str
	gemini_api_key: str
	gemini_model: str
	poll_interval: float
	host: str
	port: int
	output_dir: pathlib.Path
	viewport: ViewportConfig


#============================================
def load_service_config(environ: dict[str, str] | None = None) -> ServiceConfig:
	"""
	Build the service configuration from environment variables.

	Args:
		environ: Mapping to read from, defaults to os.environ.

	Returns:
		ServiceConfig.

	Raises:
		ValueError: When a required variable is missing or malformed.
	"""
	if environ is None:
		environ = dict(os.environ)
	missing = [
		name
		for name in ("FIGMA_API_TOKEN", "FIGMA_FILE_KEY", "GEMINI_API_KEY")
		if not environ.get(name, "").strip()
	]
	if missing:
		raise ValueError(f"Missing required environment variables: {', '.join(missing)}")

	try:
		poll_interval = float(environ.get("POLL_INTERVAL", POLL_INTERVAL))
		port = int(environ.get("PORT", DEFAULT_PORT))
	except ValueError as error:
		raise ValueError(f"Invalid numeric setting: {error}") from error
	if poll_interval <= 0.0:
		raise ValueError("POLL_INTERVAL must be positive")

	return ServiceConfig(
		figma_token=environ["FIGMA_API_TOKEN"].strip(),
		file_key=environ["FIGMA_FILE_KEY"].strip(),
		gemini_api_key=environ["GEMINI_API_KEY"].strip(),
		gemini_model=environ.get("GEMINI_MODEL", "").strip() or DEFAULT_GEMINI_MODEL,
		poll_interval=poll_interval,
		host=environ.get("HOST", "").strip() or DEFAULT_HOST,
		port=port,
		output_dir=pathlib.Path(environ.get("OUTPUT_DIR", "").strip() or DEFAULT_OUTPUT_DIR),
		viewport=ViewportConfig(),
	)
