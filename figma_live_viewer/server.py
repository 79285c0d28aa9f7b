"""
HTTP surface: snapshot access, layout preview, event stream and HTML
generation.
"""

# Standard Library
import pathlib
import queue
import threading

# PIP3 modules
import flask

# local repo modules
import figma_live_viewer as flv
import figma_live_viewer.broadcast
import figma_live_viewer.config
import figma_live_viewer.document
import figma_live_viewer.generate
import figma_live_viewer.layout
import figma_live_viewer.render


BroadcastHub = flv.broadcast.BroadcastHub
Document = flv.document.Document
ViewportConfig = flv.config.ViewportConfig
MarkupGenerator = flv.generate.MarkupGenerator
GenerationError = flv.generate.GenerationError

EVENT_KEEPALIVE = 15.0
UNAVAILABLE_MESSAGE = "No document snapshot available yet"
EMPTY_GENERATION_MESSAGE = "The model returned no HTML; nothing was saved"


class SnapshotCache:
	"""
	Parse the hub's latest snapshot once per published message.
	"""

	def __init__(self, hub: BroadcastHub) -> None:
		self.hub = hub
		self._lock = threading.Lock()
		self._message: str | None = None
		self._document: Document | None = None

	#============================================
	def document(self) -> Document | None:
		message = self.hub.latest()
		if message is None:
			return None
		with self._lock:
			if message is not self._message:
				self._document = flv.document.parse_document_json(message)
				self._message = message
			return self._document


#============================================
def format_event(message: str) -> str:
	return f"data: {message}\n\n"


#============================================
def stream_events(hub: BroadcastHub, keepalive: float = EVENT_KEEPALIVE):
	"""
	Yield server-sent events for every published snapshot.

	The latest snapshot is sent first so a new viewer renders at once.

	Args:
		hub: Broadcast hub.
		keepalive: Seconds between keepalive comments.

	Yields:
		Event stream chunks.
	"""
	subscriber = hub.subscribe()
	try:
		latest = hub.latest()
		if latest is not None:
			yield format_event(latest)
		while True:
			try:
				message = subscriber.get(timeout=keepalive)
			except queue.Empty:
				yield ": keepalive\n\n"
				continue
			yield format_event(message)
	finally:
		hub.unsubscribe(subscriber)


#============================================
def error_response(error: str, details: str, status: int) -> flask.Response:
	response = flask.jsonify({"error": error, "details": details})
	response.status_code = status
	return response


#============================================
def create_app(
	hub: BroadcastHub,
	generator: MarkupGenerator,
	output_dir: pathlib.Path,
	viewport: ViewportConfig | None = None,
	verbose: bool = False,
) -> flask.Flask:
	"""
	Build the Flask application.

	Args:
		hub: Broadcast hub fed by the poller.
		generator: Markup generator for the generate-html endpoint.
		output_dir: Directory for generated HTML files.
		viewport: Layout viewport size.
		verbose: Report every generation request.

	Returns:
		Flask app.
	"""
	if viewport is None:
		viewport = ViewportConfig()
	app = flask.Flask(__name__)
	snapshots = SnapshotCache(hub)

	def selected_layout():
		document = snapshots.document()
		if document is None:
			return None
		page = flv.document.find_page(document, flask.request.args.get("page"))
		envelope, primitives = flv.layout.layout_page(page, viewport)
		return (page, envelope, primitives)

	@app.get("/api/document")
	def get_document():
		message = hub.latest()
		if message is None:
			return error_response("unavailable", UNAVAILABLE_MESSAGE, 503)
		return flask.Response(message, mimetype="application/json")

	@app.get("/api/pages")
	def get_pages():
		document = snapshots.document()
		if document is None:
			return error_response("unavailable", UNAVAILABLE_MESSAGE, 503)
		return flask.jsonify([{"id": page.node_id, "name": page.name} for page in document.pages])

	@app.get("/api/layout")
	def get_layout():
		result = selected_layout()
		if result is None:
			return error_response("unavailable", UNAVAILABLE_MESSAGE, 503)
		page, envelope, primitives = result
		return flask.jsonify(
			{
				"pageId": page.node_id if page is not None else None,
				"envelope": flv.layout.envelope_to_dict(envelope),
				"primitives": [flv.layout.primitive_to_dict(primitive) for primitive in primitives],
			}
		)

	@app.get("/preview")
	def get_preview():
		result = selected_layout()
		if result is None:
			return error_response("unavailable", UNAVAILABLE_MESSAGE, 503)
		page, envelope, primitives = result
		title = page.name if page is not None else ""
		markup = flv.render.render_html(primitives, envelope, title)
		return flask.Response(markup, mimetype="text/html")

	@app.get("/events")
	def get_events():
		return flask.Response(
			flask.stream_with_context(stream_events(hub)),
			mimetype="text/event-stream",
			headers={"Cache-Control": "no-cache"},
		)

	@app.post("/api/generate-html")
	def post_generate_html():
		page_payload = flask.request.get_json(silent=True)
		if not isinstance(page_payload, dict) or not page_payload:
			return error_response("bad_request", "Request body must be a page node JSON object", 400)
		page_name = page_payload.get("name")
		if not isinstance(page_name, str):
			page_name = None
		if verbose:
			print(f"Generate: page {page_name!r}")
		try:
			markup = generator.generate(page_payload)
		except GenerationError as error:
			print(f"Generate: failed: {error}")
			return error_response("generation_failed", str(error), 502)
		if not markup:
			if verbose:
				print("Generate: model returned no HTML")
			return flask.jsonify(
				{
					"message": EMPTY_GENERATION_MESSAGE,
					"htmlContent": "",
					"fileName": None,
				}
			)
		path = flv.generate.save_markup(output_dir, page_name, markup)
		if verbose:
			print(f"Generate: written {path}")
		return flask.jsonify(
			{
				"message": f"HTML generated and saved as {path.name}",
				"htmlContent": markup,
				"fileName": path.name,
			}
		)

	return app
