import figma_live_viewer.document
import figma_live_viewer.style

import node_builders


#============================================
def parse_fills(raw: list) -> list:
	node = figma_live_viewer.document.parse_node({"id": "1", "type": "RECTANGLE", "fills": raw})
	return node.fills


#============================================
def test_solid_fill_scales_channels() -> None:
	"""
	A solid fill scales r, g, b to 0-255 and keeps alpha.
	"""
	fills = parse_fills([node_builders.solid(1.0, 0.0, 0.0, 0.5)])
	assert figma_live_viewer.style.resolve_fill(fills) == (255, 0, 0, 0.5)


#============================================
def test_fill_rounds_half_up() -> None:
	fills = parse_fills([node_builders.solid(0.5, 0.2, 0.002)])
	# 127.5 -> 128, 51.0 -> 51, 0.51 -> 1
	assert figma_live_viewer.style.resolve_fill(fills) == (128, 51, 1, 1.0)


#============================================
def test_transparent_fills() -> None:
	"""
	Absent, empty, non-solid and colorless fills are transparent.
	"""
	resolve_fill = figma_live_viewer.style.resolve_fill
	assert resolve_fill(None) is None
	assert resolve_fill([]) is None
	assert resolve_fill(parse_fills([{"type": "GRADIENT_LINEAR"}])) is None
	assert resolve_fill(parse_fills([{"type": "SOLID"}])) is None
	assert resolve_fill(parse_fills([{"type": "SOLID", "color": {"r": 1.0, "g": 1.0}}])) is None


#============================================
def test_only_first_fill_counts() -> None:
	fills = parse_fills([{"type": "IMAGE"}, node_builders.solid(0.0, 1.0, 0.0)])
	assert figma_live_viewer.style.resolve_fill(fills) is None
	fills = parse_fills([node_builders.solid(0.0, 0.0, 1.0), node_builders.solid(1.0, 0.0, 0.0)])
	assert figma_live_viewer.style.resolve_fill(fills) == (0, 0, 255, 1.0)


#============================================
def test_stroke_and_text_color_defaults() -> None:
	style = figma_live_viewer.style
	assert style.resolve_stroke(None) == style.DEFAULT_BORDER_COLOR
	assert style.resolve_text_color([]) == style.DEFAULT_TEXT_COLOR
	assert style.resolve_stroke(parse_fills([node_builders.solid(0.0, 0.0, 0.0)])) == (0, 0, 0, 1.0)


#============================================
def test_text_style_defaults() -> None:
	"""
	Missing style fields fall back to sans-serif at 16.
	"""
	TextStyle = figma_live_viewer.document.TextStyle
	resolve = figma_live_viewer.style.resolve_text_style
	assert resolve(None) == ("sans-serif", 16.0)
	assert resolve(TextStyle()) == ("sans-serif", 16.0)
	assert resolve(TextStyle(font_family="Inter")) == ("Inter", 16.0)
	assert resolve(TextStyle(font_size=24.0)) == ("sans-serif", 24.0)
	assert resolve(TextStyle(font_size=0.0)) == ("sans-serif", 0.0)
	assert resolve(TextStyle(font_size=-3.0)) == ("sans-serif", -3.0)


#============================================
def test_format_css_color() -> None:
	format_css_color = figma_live_viewer.style.format_css_color
	assert format_css_color(None) == "transparent"
	assert format_css_color((255, 0, 0, 0.5)) == "rgba(255,0,0,0.5)"
	assert format_css_color((1, 2, 3, 1.0)) == "rgba(1,2,3,1)"
