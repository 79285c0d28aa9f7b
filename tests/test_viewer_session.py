import json

import figma_live_viewer.config
import figma_live_viewer.viewer

import node_builders


#============================================
def two_page_message() -> str:
	payload = node_builders.document_payload(
		[
			node_builders.frame_node(
				"1:1",
				[node_builders.rect_node("r1", node_builders.box(0, 0, 1800, 600))],
				node_type="CANVAS",
			),
			node_builders.frame_node(
				"1:2",
				[node_builders.text_node("t2", node_builders.box(10, 10, 100, 20), "Hi")],
				node_type="CANVAS",
			),
		]
	)
	payload["document"]["children"][1]["name"] = "Landing / v2"
	return json.dumps(payload)


#============================================
def test_first_snapshot_selects_first_page() -> None:
	session = figma_live_viewer.viewer.ViewerSession()
	assert session.receive_message(two_page_message())
	assert session.selected_page_id == "1:1"
	envelope, primitives = session.layout()
	assert envelope.scale == 0.5
	assert [primitive.node_id for primitive in primitives] == ["r1"]


#============================================
def test_select_page_recomputes_layout() -> None:
	session = figma_live_viewer.viewer.ViewerSession()
	session.receive_message(two_page_message())
	first = session.layout()
	session.select_page("1:2")
	second = session.layout()
	assert second is not first
	assert [primitive.node_id for primitive in second[1]] == ["t2"]
	assert session.layout() is second


#============================================
def test_bad_message_keeps_last_snapshot() -> None:
	"""
	A malformed snapshot sets the error and leaves the document intact.
	"""
	session = figma_live_viewer.viewer.ViewerSession()
	session.receive_message(two_page_message())
	layout_before = session.layout()
	assert not session.receive_message("{broken")
	assert session.error == figma_live_viewer.viewer.PARSE_ERROR_MESSAGE
	assert session.document is not None
	assert session.layout() is layout_before

	assert session.receive_message(two_page_message())
	assert session.error is None
	assert session.layout() is not layout_before


#============================================
def test_unavailable_keeps_document() -> None:
	session = figma_live_viewer.viewer.ViewerSession()
	session.receive_message(two_page_message())
	session.mark_unavailable("connection lost")
	assert session.error == "connection lost"
	assert len(session.pages()) == 2


#============================================
def test_empty_session_layout() -> None:
	viewport = figma_live_viewer.config.ViewportConfig(width=320.0, height=240.0)
	session = figma_live_viewer.viewer.ViewerSession(viewport)
	envelope, primitives = session.layout()
	assert (envelope.scale, envelope.viewport_width, envelope.viewport_height) == (1.0, 320.0, 240.0)
	assert primitives == []
	assert session.pages() == []


#============================================
def test_generation_results() -> None:
	"""
	Placeholders for missing or failed output are not downloadable.
	"""
	session = figma_live_viewer.viewer.ViewerSession()
	session.receive_message(two_page_message())
	session.select_page("1:2")

	session.start_generation()
	session.apply_generation({"message": "saved", "htmlContent": "<html></html>"})
	assert session.server_message == "saved"
	assert session.can_download()
	assert session.download_name() == "Landing___v2.html"

	session.apply_generation({"message": "saved"})
	assert session.generated_html == figma_live_viewer.viewer.MISSING_HTML_PLACEHOLDER
	assert not session.can_download()

	session.apply_generation_error("Server responded with 502")
	assert session.error == "Failed to generate HTML: Server responded with 502"
	assert session.server_message == ""
	assert not session.can_download()

	session.start_generation()
	assert session.generated_html == ""
	assert session.error is None
