"""
Rendering of projected primitives to HTML, PDF and PNG.
"""

# Standard Library
import html
import math
import pathlib

# PIP3 modules
import PIL.Image
import PIL.ImageDraw
import PIL.ImageFont
import reportlab.pdfgen.canvas

# local repo modules
import figma_live_viewer as flv
import figma_live_viewer.config
import figma_live_viewer.layout
import figma_live_viewer.style


Envelope = flv.layout.Envelope
RectPrimitive = flv.layout.RectPrimitive
TextPrimitive = flv.layout.TextPrimitive
VisualPrimitive = flv.layout.VisualPrimitive
RGBA = flv.style.RGBA

BORDER_WIDTH = flv.config.BORDER_WIDTH
TEXT_LEADING = flv.config.TEXT_LEADING
PDF_FONT_REGULAR = flv.config.PDF_FONT_REGULAR
PNG_BACKGROUND = flv.config.PNG_BACKGROUND

HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
<div class="figma-render-area" style="position:relative;overflow:hidden;width:{width:g}px;height:{height:g}px;">
{body}
</div>
</body>
</html>
"""


#============================================
def format_px(value: float) -> str:
	return f"{value:g}px"


#============================================
def rect_to_html(primitive: RectPrimitive) -> str:
	"""
	Build an absolutely positioned div for a rectangle.

	Args:
		primitive: Rect primitive.

	Returns:
		HTML fragment.
	"""
	style = ";".join(
		[
			"position:absolute",
			f"left:{format_px(primitive.x)}",
			f"top:{format_px(primitive.y)}",
			f"width:{format_px(primitive.width)}",
			f"height:{format_px(primitive.height)}",
			f"background:{flv.style.format_css_color(primitive.color)}",
			f"border:{BORDER_WIDTH:g}px solid {flv.style.format_css_color(primitive.stroke)}",
			"box-sizing:border-box",
		]
	)
	node_id = html.escape(primitive.node_id, quote=True)
	return f'<div data-node-id="{node_id}" style="{style}"></div>'


#============================================
def text_to_html(primitive: TextPrimitive) -> str:
	"""
	Build an absolutely positioned div for a text block.

	Args:
		primitive: Text primitive.

	Returns:
		HTML fragment.
	"""
	font_family = html.escape(primitive.font_family, quote=True)
	style = ";".join(
		[
			"position:absolute",
			f"left:{format_px(primitive.x)}",
			f"top:{format_px(primitive.y)}",
			f"width:{format_px(primitive.width)}",
			f"height:{format_px(primitive.height)}",
			f"color:{flv.style.format_css_color(primitive.color)}",
			f"font-size:{format_px(primitive.font_size)}",
			f"font-family:{font_family}",
			"white-space:pre-wrap",
			"display:flex",
			"align-items:center",
		]
	)
	node_id = html.escape(primitive.node_id, quote=True)
	text = html.escape(primitive.text)
	return f'<div data-node-id="{node_id}" style="{style}">{text}</div>'


#============================================
def render_html(
	primitives: list[VisualPrimitive],
	envelope: Envelope,
	title: str = "",
) -> str:
	"""
	Render primitives as a standalone HTML document.

	Args:
		primitives: Projected primitives in drawing order.
		envelope: Envelope supplying the viewport size.
		title: Document title.

	Returns:
		HTML text.
	"""
	fragments: list[str] = []
	for primitive in primitives:
		if isinstance(primitive, TextPrimitive):
			fragments.append(text_to_html(primitive))
		else:
			fragments.append(rect_to_html(primitive))
	return HTML_TEMPLATE.format(
		title=html.escape(title),
		width=envelope.viewport_width,
		height=envelope.viewport_height,
		body="\n".join(fragments),
	)


#============================================
def set_pdf_fill(pdf: reportlab.pdfgen.canvas.Canvas, color: RGBA) -> None:
	pdf.setFillColorRGB(color[0] / 255.0, color[1] / 255.0, color[2] / 255.0)
	pdf.setFillAlpha(max(0.0, min(1.0, color[3])))


#============================================
def draw_rect_primitive(
	pdf: reportlab.pdfgen.canvas.Canvas,
	primitive: RectPrimitive,
	page_height: float,
) -> None:
	"""
	Draw a rectangle onto the PDF canvas.

	Args:
		pdf: ReportLab canvas.
		primitive: Rect primitive in top-left screen space.
		page_height: Page height for flipping the y axis.
	"""
	pdf_y = page_height - primitive.y - primitive.height
	stroke = primitive.stroke
	pdf.setStrokeColorRGB(stroke[0] / 255.0, stroke[1] / 255.0, stroke[2] / 255.0)
	pdf.setStrokeAlpha(max(0.0, min(1.0, stroke[3])))
	pdf.setLineWidth(BORDER_WIDTH)
	if primitive.color is None:
		pdf.rect(primitive.x, pdf_y, primitive.width, primitive.height, stroke=1, fill=0)
		return
	set_pdf_fill(pdf, primitive.color)
	pdf.rect(primitive.x, pdf_y, primitive.width, primitive.height, stroke=1, fill=1)


#============================================
def draw_text_primitive(
	pdf: reportlab.pdfgen.canvas.Canvas,
	primitive: TextPrimitive,
	page_height: float,
) -> None:
	"""
	Draw a text block onto the PDF canvas, vertically centered.

	Args:
		pdf: ReportLab canvas.
		primitive: Text primitive in top-left screen space.
		page_height: Page height for flipping the y axis.
	"""
	lines = primitive.text.splitlines()
	if not lines or primitive.font_size <= 0.0:
		return
	font_size = primitive.font_size
	leading = font_size * TEXT_LEADING
	text_height = font_size + leading * (len(lines) - 1)
	top = primitive.y + (primitive.height - text_height) / 2.0

	set_pdf_fill(pdf, primitive.color)
	# standard PDF fonts only, family names are not embedded
	pdf.setFont(PDF_FONT_REGULAR, font_size)
	for index, line in enumerate(lines):
		baseline = top + font_size + index * leading
		pdf.drawString(primitive.x, page_height - baseline, line)


#============================================
def render_pdf(
	pages: list[tuple[str, Envelope, list[VisualPrimitive]]],
	output_path: pathlib.Path,
) -> int:
	"""
	Render one PDF page per laid out design page.

	Args:
		pages: List of (title, envelope, primitives).
		output_path: Output PDF path.

	Returns:
		Number of pages written.
	"""
	output_path.parent.mkdir(parents=True, exist_ok=True)
	pdf = reportlab.pdfgen.canvas.Canvas(str(output_path))
	for index, (title, envelope, primitives) in enumerate(pages):
		page_width = envelope.viewport_width
		page_height = envelope.viewport_height
		pdf.setPageSize((page_width, page_height))
		if title:
			key = f"page-{index}"
			pdf.bookmarkPage(key)
			pdf.addOutlineEntry(title, key)
		for primitive in primitives:
			if isinstance(primitive, TextPrimitive):
				draw_text_primitive(pdf, primitive, page_height)
			else:
				draw_rect_primitive(pdf, primitive, page_height)
		pdf.showPage()
	pdf.save()
	return len(pages)


#============================================
def to_pil_color(color: RGBA) -> tuple[int, int, int, int]:
	alpha = max(0.0, min(1.0, color[3]))
	return (color[0], color[1], color[2], int(round(alpha * 255.0)))


#============================================
def render_png(
	primitives: list[VisualPrimitive],
	envelope: Envelope,
	output_path: pathlib.Path,
) -> PIL.Image.Image:
	"""
	Rasterize primitives onto a white viewport image.

	Args:
		primitives: Projected primitives in drawing order.
		envelope: Envelope supplying the viewport size.
		output_path: Output PNG path.

	Returns:
		Rendered PIL image.
	"""
	size = (
		max(1, int(math.ceil(envelope.viewport_width))),
		max(1, int(math.ceil(envelope.viewport_height))),
	)
	image = PIL.Image.new("RGBA", size, PNG_BACKGROUND)
	draw = PIL.ImageDraw.Draw(image, "RGBA")
	for primitive in primitives:
		if primitive.width < 0.0 or primitive.height < 0.0:
			continue
		if isinstance(primitive, TextPrimitive):
			if not primitive.text or primitive.font_size <= 0.0:
				continue
			font = PIL.ImageFont.load_default(size=primitive.font_size)
			draw.multiline_text(
				(primitive.x, primitive.y),
				primitive.text,
				fill=to_pil_color(primitive.color),
				font=font,
			)
			continue
		box = (
			primitive.x,
			primitive.y,
			primitive.x + primitive.width,
			primitive.y + primitive.height,
		)
		fill = None
		if primitive.color is not None:
			fill = to_pil_color(primitive.color)
		draw.rectangle(box, fill=fill, outline=to_pil_color(primitive.stroke), width=int(BORDER_WIDTH))
	output_path.parent.mkdir(parents=True, exist_ok=True)
	image.save(output_path, format="PNG")
	return image
