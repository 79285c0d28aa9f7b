"""
Fill, stroke and typography resolution for projected nodes.
"""

# Standard Library
import math

# local repo modules
import figma_live_viewer as flv
import figma_live_viewer.config
import figma_live_viewer.document


Fill = flv.document.Fill
TextStyle = flv.document.TextStyle

DEFAULT_FONT_FAMILY = flv.config.DEFAULT_FONT_FAMILY
DEFAULT_FONT_SIZE = flv.config.DEFAULT_FONT_SIZE
DEFAULT_TEXT_COLOR = flv.config.DEFAULT_TEXT_COLOR
DEFAULT_BORDER_COLOR = flv.config.DEFAULT_BORDER_COLOR

SOLID = "SOLID"

# (red, green, blue, alpha), channels 0-255, alpha 0.0-1.0
RGBA = tuple[int, int, int, float]


#============================================
def scale_channel(value: float) -> int:
	"""
	Scale a 0.0-1.0 channel to 0-255.

	Rounds half up, so 0.5/255 steps land on the same integer as the
	browser renderer.

	Args:
		value: Channel value.

	Returns:
		Integer channel clamped to 0-255.
	"""
	scaled = math.floor(value * 255.0 + 0.5)
	return max(0, min(255, scaled))


#============================================
def resolve_paint(paints: tuple[Fill, ...] | None) -> RGBA | None:
	"""
	Resolve the topmost paint entry to a color.

	Args:
		paints: Fill or stroke list.

	Returns:
		RGBA tuple, or None when no solid color applies.
	"""
	if not paints:
		return None
	first = paints[0]
	if first.fill_type != SOLID or first.color is None:
		return None
	color = first.color
	return (
		scale_channel(color.r),
		scale_channel(color.g),
		scale_channel(color.b),
		color.a,
	)


#============================================
def resolve_fill(fills: tuple[Fill, ...] | None) -> RGBA | None:
	"""
	Resolve the fill color of a node.

	Only the first entry is considered; later fills are ignored.

	Args:
		fills: Node fills.

	Returns:
		RGBA tuple, or None for transparent.
	"""
	return resolve_paint(fills)


#============================================
def resolve_stroke(strokes: tuple[Fill, ...] | None) -> RGBA:
	"""
	Resolve the border color of a rectangle.

	Args:
		strokes: Node strokes.

	Returns:
		RGBA tuple, the default border color when no solid stroke applies.
	"""
	color = resolve_paint(strokes)
	if color is None:
		return DEFAULT_BORDER_COLOR
	return color


#============================================
def resolve_text_color(fills: tuple[Fill, ...] | None) -> RGBA:
	"""
	Resolve the glyph color of a text node.

	Args:
		fills: Node fills.

	Returns:
		RGBA tuple, the default text color when no solid fill applies.
	"""
	color = resolve_paint(fills)
	if color is None:
		return DEFAULT_TEXT_COLOR
	return color


#============================================
def resolve_text_style(style: TextStyle | None) -> tuple[str, float]:
	"""
	Resolve font family and size with defaults.

	Non-positive sizes pass through unchanged.

	Args:
		style: Node text style.

	Returns:
		Tuple of (font_family, font_size).
	"""
	if style is None:
		return (DEFAULT_FONT_FAMILY, DEFAULT_FONT_SIZE)
	font_family = style.font_family or DEFAULT_FONT_FAMILY
	font_size = DEFAULT_FONT_SIZE
	if style.font_size is not None:
		font_size = style.font_size
	return (font_family, font_size)


#============================================
def format_css_color(color: RGBA | None) -> str:
	"""
	Format a color for CSS.

	Args:
		color: RGBA tuple or None.

	Returns:
		CSS color string.
	"""
	if color is None:
		return "transparent"
	return f"rgba({color[0]},{color[1]},{color[2]},{color[3]:g})"
