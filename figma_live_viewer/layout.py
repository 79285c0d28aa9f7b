"""
Bounding envelope computation and projection of node trees into
screen-space primitives.

The functions here are pure. A new envelope and primitive list is
computed for every document snapshot or page selection; nothing is
updated in place.
"""

# Standard Library
import dataclasses

# local repo modules
import figma_live_viewer as flv
import figma_live_viewer.config
import figma_live_viewer.document
import figma_live_viewer.style


DocumentNode = flv.document.DocumentNode
BoundingBox = flv.document.BoundingBox
ViewportConfig = flv.config.ViewportConfig
RGBA = flv.style.RGBA

KIND_RECTANGLE = flv.document.KIND_RECTANGLE
KIND_TEXT = flv.document.KIND_TEXT


@dataclasses.dataclass(frozen=True)
class Envelope:
	offset_x: float
	offset_y: float
	scale: float
	viewport_width: float
	viewport_height: float


@dataclasses.dataclass(frozen=True)
class RectPrimitive:
	node_id: str
	x: float
	y: float
	width: float
	height: float
	color: RGBA | None
	stroke: RGBA


@dataclasses.dataclass(frozen=True)
class TextPrimitive:
	node_id: str
	x: float
	y: float
	width: float
	height: float
	color: RGBA
	font_size: float
	font_family: str
	text: str


VisualPrimitive = RectPrimitive | TextPrimitive


#============================================
def collect_boxed(root: DocumentNode) -> list[DocumentNode]:
	"""
	Collect every node in a subtree that carries a bounding box.

	Pre-order, depth first, children in stored order.

	Args:
		root: Subtree root.

	Returns:
		List of boxed nodes.
	"""
	boxed: list[DocumentNode] = []
	stack = [root]
	while stack:
		node = stack.pop()
		if node.box is not None:
			boxed.append(node)
		stack.extend(reversed(node.children))
	return boxed


#============================================
def compute_envelope(
	root: DocumentNode,
	viewport_width: float,
	viewport_height: float,
) -> Envelope:
	"""
	Compute the offset and fit-to-viewport scale for a subtree.

	Args:
		root: Subtree root, usually a page.
		viewport_width: Target viewport width.
		viewport_height: Target viewport height.

	Returns:
		Envelope. Scale never exceeds 1.
	"""
	nodes = collect_boxed(root)
	if not nodes:
		return Envelope(0.0, 0.0, 1.0, viewport_width, viewport_height)

	min_x = min(node.box.x for node in nodes)
	min_y = min(node.box.y for node in nodes)
	max_x = max(node.box.x + node.box.width for node in nodes)
	max_y = max(node.box.y + node.box.height for node in nodes)

	# floor of 1 keeps a single zero-size node from dividing by zero
	page_width = max(max_x - min_x, 1.0)
	page_height = max(max_y - min_y, 1.0)

	scale = 1.0
	if page_width > viewport_width or page_height > viewport_height:
		scale = min(viewport_width / page_width, viewport_height / page_height)

	return Envelope(min_x, min_y, scale, viewport_width, viewport_height)


#============================================
def transform_box(
	box: BoundingBox | None,
	envelope: Envelope,
) -> tuple[float, float, float, float]:
	"""
	Map a document-space box into screen space.

	Args:
		box: Node bounding box, missing boxes map from the origin.
		envelope: Offset and scale.

	Returns:
		Tuple of (x, y, width, height).
	"""
	if box is None:
		box = BoundingBox()
	screen_x = (box.x - envelope.offset_x) * envelope.scale
	screen_y = (box.y - envelope.offset_y) * envelope.scale
	screen_width = box.width * envelope.scale
	screen_height = box.height * envelope.scale
	return (screen_x, screen_y, screen_width, screen_height)


#============================================
def project_rectangle(node: DocumentNode, envelope: Envelope) -> RectPrimitive:
	x, y, width, height = transform_box(node.box, envelope)
	return RectPrimitive(
		node_id=node.node_id,
		x=x,
		y=y,
		width=width,
		height=height,
		color=flv.style.resolve_fill(node.fills),
		stroke=flv.style.resolve_stroke(node.strokes),
	)


#============================================
def project_text(node: DocumentNode, envelope: Envelope) -> TextPrimitive:
	x, y, width, height = transform_box(node.box, envelope)
	font_family, font_size = flv.style.resolve_text_style(node.style)
	return TextPrimitive(
		node_id=node.node_id,
		x=x,
		y=y,
		width=width,
		height=height,
		color=flv.style.resolve_text_color(node.fills),
		font_size=font_size * envelope.scale,
		font_family=font_family,
		text=node.text or "",
	)


#============================================
def project(root: DocumentNode, envelope: Envelope) -> list[VisualPrimitive]:
	"""
	Project a subtree into positioned primitives in drawing order.

	Rectangles and text nodes are terminal and emit one primitive each.
	Every other node type emits nothing itself and projects its children.
	Boxed descendants of a rectangle or text node still count toward
	compute_envelope even though they are never drawn here.

	Args:
		root: Subtree root.
		envelope: Offset and scale from compute_envelope.

	Returns:
		List of primitives, later entries drawn on top.
	"""
	primitives: list[VisualPrimitive] = []
	stack = [root]
	while stack:
		node = stack.pop()
		if node.kind == KIND_RECTANGLE:
			primitives.append(project_rectangle(node, envelope))
			continue
		if node.kind == KIND_TEXT:
			primitives.append(project_text(node, envelope))
			continue
		stack.extend(reversed(node.children))
	return primitives


#============================================
def layout_page(
	page: DocumentNode | None,
	viewport: ViewportConfig,
) -> tuple[Envelope, list[VisualPrimitive]]:
	"""
	Compute the envelope and primitives for a page.

	Args:
		page: Selected page or None.
		viewport: Target viewport size.

	Returns:
		Tuple of (envelope, primitives).
	"""
	if page is None:
		envelope = Envelope(0.0, 0.0, 1.0, viewport.width, viewport.height)
		return (envelope, [])
	envelope = compute_envelope(page, viewport.width, viewport.height)
	return (envelope, project(page, envelope))


#============================================
def envelope_to_dict(envelope: Envelope) -> dict:
	return {
		"offset": {"x": envelope.offset_x, "y": envelope.offset_y},
		"scale": envelope.scale,
		"viewportWidth": envelope.viewport_width,
		"viewportHeight": envelope.viewport_height,
	}


#============================================
def primitive_to_dict(primitive: VisualPrimitive) -> dict:
	"""
	Convert a primitive into a JSON-serializable dict.

	Args:
		primitive: Rect or text primitive.

	Returns:
		Dict with a "kind" tag.
	"""
	data = dataclasses.asdict(primitive)
	if isinstance(primitive, TextPrimitive):
		data["kind"] = "text"
	else:
		data["kind"] = "rect"
	for key in ("color", "stroke"):
		if data.get(key) is not None:
			data[key] = list(data[key])
	return data
