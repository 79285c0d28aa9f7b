"""
Client for the Figma files API.
"""

# PIP3 modules
import requests

# local repo modules
import figma_live_viewer as flv
import figma_live_viewer.config


FIGMA_API_URL = flv.config.FIGMA_API_URL
FIGMA_TIMEOUT = flv.config.FIGMA_TIMEOUT


class FigmaApiError(Exception):
	"""
	Raised when a file cannot be fetched from the Figma API.
	"""


#============================================
def build_file_url(file_key: str) -> str:
	return f"{FIGMA_API_URL}/{file_key}"


#============================================
def fetch_file(
	session: requests.Session,
	file_key: str,
	token: str,
	timeout: float = FIGMA_TIMEOUT,
) -> dict:
	"""
	Fetch a full document snapshot.

	Args:
		session: Requests session.
		file_key: Figma file key.
		token: Personal access token.
		timeout: Request timeout in seconds.

	Returns:
		Decoded JSON payload.

	Raises:
		FigmaApiError: On network errors, non-2xx responses or bad JSON.
	"""
	url = build_file_url(file_key)
	try:
		response = session.get(url, headers={"X-Figma-Token": token}, timeout=timeout)
		response.raise_for_status()
	except requests.RequestException as error:
		raise FigmaApiError(f"Figma request failed: {error}") from error
	try:
		payload = response.json()
	except ValueError as error:
		raise FigmaApiError(f"Figma response is not JSON: {error}") from error
	if not isinstance(payload, dict):
		raise FigmaApiError("Figma response is not a JSON object")
	return payload
