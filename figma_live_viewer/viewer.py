"""
Per-viewer state: current snapshot, page selection and generation output.
"""

# Standard Library
import typing

# local repo modules
import figma_live_viewer as flv
import figma_live_viewer.config
import figma_live_viewer.document
import figma_live_viewer.generate
import figma_live_viewer.layout


Document = flv.document.Document
DocumentNode = flv.document.DocumentNode
DocumentParseError = flv.document.DocumentParseError
ViewportConfig = flv.config.ViewportConfig
Envelope = flv.layout.Envelope
VisualPrimitive = flv.layout.VisualPrimitive

PARSE_ERROR_MESSAGE = "Failed to parse Figma data"
MISSING_HTML_PLACEHOLDER = "<p>HTML content was not provided by the server.</p>"
ERROR_HTML_PLACEHOLDER = '<p style="color: red;">Error fetching or processing HTML from backend.</p>'


class ViewerSession:
	"""
	State for one connected viewer.

	Each received snapshot replaces the previous one as a whole. Layout
	is recomputed on the first request after the snapshot or the page
	selection changes.
	"""

	def __init__(self, viewport: ViewportConfig | None = None) -> None:
		if viewport is None:
			viewport = ViewportConfig()
		self.viewport = viewport
		self.document: Document | None = None
		self.error: str | None = None
		self.selected_page_id: str | None = None
		self.generated_html = ""
		self.server_message = ""
		self._layout_key: tuple[int, str | None] | None = None
		self._layout: tuple[Envelope, list[VisualPrimitive]] | None = None
		self._revision = 0

	#============================================
	def receive_message(self, data: str | bytes) -> bool:
		"""
		Apply a snapshot received from the push channel.

		Args:
			data: Serialized document.

		Returns:
			True when the snapshot was applied.
		"""
		try:
			document = flv.document.parse_document_json(data)
		except DocumentParseError as error:
			self.error = PARSE_ERROR_MESSAGE
			print(f"Viewer: parse error: {error}")
			return False
		self.document = document
		self.error = None
		self._revision += 1
		if self.selected_page_id is None and document.pages:
			self.selected_page_id = document.pages[0].node_id
		return True

	#============================================
	def mark_unavailable(self, reason: str) -> None:
		self.error = reason

	#============================================
	def select_page(self, page_id: str | None) -> None:
		self.selected_page_id = page_id

	#============================================
	def pages(self) -> list[DocumentNode]:
		if self.document is None:
			return []
		return list(self.document.pages)

	#============================================
	def current_page(self) -> DocumentNode | None:
		return flv.document.find_page(self.document, self.selected_page_id)

	#============================================
	def layout(self) -> tuple[Envelope, list[VisualPrimitive]]:
		"""
		Return the envelope and primitives for the selected page.

		Returns:
			Tuple of (envelope, primitives).
		"""
		key = (self._revision, self.selected_page_id)
		if self._layout is None or self._layout_key != key:
			self._layout = flv.layout.layout_page(self.current_page(), self.viewport)
			self._layout_key = key
		return self._layout

	#============================================
	def start_generation(self) -> None:
		self.generated_html = ""
		self.server_message = ""
		self.error = None

	#============================================
	def apply_generation(self, result: dict) -> None:
		"""
		Store a successful generate-html response.

		Args:
			result: Response body with message and htmlContent.
		"""
		self.server_message = result.get("message", "")
		html_content = result.get("htmlContent")
		if html_content:
			self.generated_html = html_content
		else:
			self.generated_html = MISSING_HTML_PLACEHOLDER

	#============================================
	def apply_generation_error(self, message: str) -> None:
		self.error = f"Failed to generate HTML: {message}"
		self.generated_html = ERROR_HTML_PLACEHOLDER
		self.server_message = ""

	#============================================
	def can_download(self) -> bool:
		if not self.generated_html:
			return False
		return self.generated_html not in (MISSING_HTML_PLACEHOLDER, ERROR_HTML_PLACEHOLDER)

	#============================================
	def download_name(self) -> str:
		page = self.current_page()
		page_name = page.name if page is not None else None
		return f"{flv.generate.safe_file_stem(page_name)}.html"


#============================================
def iter_event_data(lines: typing.Iterable[str]) -> typing.Iterator[str]:
	"""
	Collect the data payloads of a server-sent event stream.

	Multi-line data fields are joined with newlines; comments are skipped.

	Args:
		lines: Decoded stream lines without line endings.

	Yields:
		One payload per dispatched event.
	"""
	buffer: list[str] = []
	for line in lines:
		if not line:
			if buffer:
				yield "\n".join(buffer)
				buffer = []
			continue
		if line.startswith(":"):
			continue
		field, _, value = line.partition(":")
		if field != "data":
			continue
		if value.startswith(" "):
			value = value[1:]
		buffer.append(value)
