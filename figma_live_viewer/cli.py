"""
CLI entry points for rendering snapshots and serving live viewers.
"""

# Standard Library
import argparse
import pathlib
import time
import typing

# PIP3 modules
import requests

# local repo modules
import figma_live_viewer as flv
import figma_live_viewer.broadcast
import figma_live_viewer.config
import figma_live_viewer.document
import figma_live_viewer.figma_api
import figma_live_viewer.generate
import figma_live_viewer.layout
import figma_live_viewer.render
import figma_live_viewer.server
import figma_live_viewer.viewer


ViewportConfig = flv.config.ViewportConfig

DEFAULT_VIEWPORT_WIDTH = flv.config.DEFAULT_VIEWPORT_WIDTH
DEFAULT_VIEWPORT_HEIGHT = flv.config.DEFAULT_VIEWPORT_HEIGHT
DEFAULT_EVENTS_URL = f"http://{flv.config.DEFAULT_HOST}:{flv.config.DEFAULT_PORT}/events"


#============================================
def build_viewport(args: argparse.Namespace) -> ViewportConfig:
	"""
	Build the viewport from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		ViewportConfig.
	"""
	if args.viewport_width <= 0.0 or args.viewport_height <= 0.0:
		raise ValueError("Viewport dimensions must be positive")
	return ViewportConfig(width=args.viewport_width, height=args.viewport_height)


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Optional argument list, defaults to sys.argv.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Render and serve live Figma document layouts.")
	subparsers = parser.add_subparsers(dest="command", required=True)

	render_parser = subparsers.add_parser("render", help="Render a saved document snapshot.")
	render_parser.add_argument("input_path", help="Document JSON file from the files API.")

	output_group = render_parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", required=True, help="Output PDF path.")
	output_group.add_argument("--html-dir", dest="html_dir", default=None, help="Write one HTML preview per page.")
	output_group.add_argument("--png-dir", dest="png_dir", default=None, help="Write one PNG preview per page.")

	page_group = render_parser.add_argument_group("Pages")
	page_group.add_argument("-p", "--page", dest="page_id", default=None, help="Page id to render.")
	page_group.add_argument("-a", "--all-pages", dest="all_pages", action="store_true", help="Render every page.")

	serve_parser = subparsers.add_parser("serve", help="Poll the files API and serve viewers.")
	serve_parser.add_argument("-v", "--verbose", dest="verbose", action="store_true", help="Report every poll.")

	watch_parser = subparsers.add_parser("watch", help="Follow a running server's event stream.")
	watch_parser.add_argument("url", nargs="?", default=DEFAULT_EVENTS_URL, help="Event stream URL.")
	watch_parser.add_argument("-p", "--page", dest="page_id", default=None, help="Page id to lay out.")
	watch_parser.add_argument("--html", dest="html_path", default=None, help="Rewrite an HTML preview on every snapshot.")

	for sub in (render_parser, serve_parser, watch_parser):
		viewport_group = sub.add_argument_group("Viewport")
		viewport_group.add_argument(
			"--viewport-width",
			dest="viewport_width",
			type=float,
			default=DEFAULT_VIEWPORT_WIDTH,
			help="Viewport width.",
		)
		viewport_group.add_argument(
			"--viewport-height",
			dest="viewport_height",
			type=float,
			default=DEFAULT_VIEWPORT_HEIGHT,
			help="Viewport height.",
		)

	parser.set_defaults(all_pages=False, verbose=False)
	args = parser.parse_args(argv)
	return args


#============================================
def run_render(args: argparse.Namespace) -> int:
	"""
	Lay out and render pages from a saved snapshot.

	Args:
		args: Parsed argparse namespace.

	Returns:
		Number of pages rendered.
	"""
	viewport = build_viewport(args)
	input_path = pathlib.Path(args.input_path)
	output_path = pathlib.Path(args.output_path)
	print(f"Input: {input_path}")
	print(f"Output PDF: {output_path}")
	print(f"Viewport: {viewport.width:g}x{viewport.height:g}")

	start_time = time.perf_counter()
	with open(input_path, "r", encoding="utf-8") as handle:
		document = flv.document.parse_document_json(handle.read())
	print(f"Document: {document.name!r} with {len(document.pages)} page(s)")

	if args.all_pages:
		pages = list(document.pages)
	else:
		page = flv.document.find_page(document, args.page_id)
		pages = [page] if page is not None else []
	if not pages:
		print("No pages to render.")
		return 0

	layout_start = time.perf_counter()
	rendered = []
	for page in pages:
		envelope, primitives = flv.layout.layout_page(page, viewport)
		print(f"Page {page.name!r}: {len(primitives)} primitive(s), scale {envelope.scale:.4f}")
		rendered.append((page.name, envelope, primitives))
	layout_end = time.perf_counter()

	count = flv.render.render_pdf(rendered, output_path)
	print(f"Pages written: {count}")

	for (title, envelope, primitives), page in zip(rendered, pages):
		stem = flv.generate.safe_file_stem(page.name)
		if args.html_dir:
			html_path = pathlib.Path(args.html_dir) / f"{stem}.html"
			html_path.parent.mkdir(parents=True, exist_ok=True)
			with open(html_path, "w", encoding="utf-8") as handle:
				handle.write(flv.render.render_html(primitives, envelope, title))
			print(f"HTML preview: {html_path}")
		if args.png_dir:
			png_path = pathlib.Path(args.png_dir) / f"{stem}.png"
			flv.render.render_png(primitives, envelope, png_path)
			print(f"PNG preview: {png_path}")

	total_time = time.perf_counter() - start_time
	print(
		"Timing: layout={:.2f}s total={:.2f}s".format(
			layout_end - layout_start,
			total_time,
		)
	)
	return count


#============================================
def run_serve(args: argparse.Namespace) -> None:
	"""
	Start the poller and the HTTP server.

	Args:
		args: Parsed argparse namespace.
	"""
	config = flv.config.load_service_config()
	viewport = build_viewport(args)
	print(f"File key: {config.file_key}")
	print(f"Poll interval: {config.poll_interval:g}s")
	print(f"Model: {config.gemini_model}")
	print(f"Output directory: {config.output_dir}")

	# poller thread and request handlers use separate sessions
	figma_session = requests.Session()
	gemini_session = requests.Session()
	hub = flv.broadcast.BroadcastHub()

	def fetch() -> dict:
		return flv.figma_api.fetch_file(figma_session, config.file_key, config.figma_token)

	poller = flv.broadcast.DocumentPoller(fetch, hub, config.poll_interval, verbose=args.verbose)
	generator = flv.generate.MarkupGenerator(gemini_session, config.gemini_api_key, config.gemini_model)
	app = flv.server.create_app(hub, generator, config.output_dir, viewport, verbose=args.verbose)

	poller.start()
	print(f"Serving on http://{config.host}:{config.port}")
	try:
		app.run(host=config.host, port=config.port, threaded=True)
	finally:
		poller.stop(timeout=1.0)


#============================================
def follow_events(
	viewer_session: "flv.viewer.ViewerSession",
	lines: typing.Iterable[str],
	html_path: pathlib.Path | None = None,
) -> int:
	"""
	Apply every snapshot of an event stream to a viewer session.

	Args:
		viewer_session: Session receiving the snapshots.
		lines: Decoded event stream lines.
		html_path: Optional HTML preview rewritten per snapshot.

	Returns:
		Number of snapshots applied.
	"""
	applied = 0
	for data in flv.viewer.iter_event_data(lines):
		if not viewer_session.receive_message(data):
			continue
		applied += 1
		page = viewer_session.current_page()
		envelope, primitives = viewer_session.layout()
		page_name = page.name if page is not None else ""
		print(
			f"Snapshot {applied}: page {page_name!r}, "
			f"{len(primitives)} primitive(s), scale {envelope.scale:.4f}"
		)
		if html_path is not None:
			html_path.parent.mkdir(parents=True, exist_ok=True)
			with open(html_path, "w", encoding="utf-8") as handle:
				handle.write(flv.render.render_html(primitives, envelope, page_name))
	return applied


#============================================
def run_watch(args: argparse.Namespace) -> "flv.viewer.ViewerSession":
	"""
	Follow a server's event stream until it closes.

	Args:
		args: Parsed argparse namespace.

	Returns:
		The viewer session with the last applied snapshot.
	"""
	viewer_session = flv.viewer.ViewerSession(build_viewport(args))
	viewer_session.select_page(args.page_id)
	html_path = pathlib.Path(args.html_path) if args.html_path else None
	print(f"Watching: {args.url}")
	session = requests.Session()
	try:
		with session.get(args.url, stream=True, timeout=(10.0, None)) as response:
			response.raise_for_status()
			follow_events(viewer_session, response.iter_lines(decode_unicode=True), html_path)
	except requests.RequestException as error:
		viewer_session.mark_unavailable(f"Event stream unavailable: {error}")
		print(viewer_session.error)
	return viewer_session


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	if args.command == "render":
		run_render(args)
		return
	if args.command == "watch":
		run_watch(args)
		return
	run_serve(args)
