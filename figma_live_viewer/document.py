"""
Figma document parsing and normalization.
"""

# Standard Library
import dataclasses
import json


KIND_RECTANGLE = "rectangle"
KIND_TEXT = "text"
KIND_CONTAINER = "container"

NODE_KINDS = {
	"RECTANGLE": KIND_RECTANGLE,
	"TEXT": KIND_TEXT,
}


class DocumentParseError(ValueError):
	"""
	Raised when a document payload cannot be decoded.
	"""


@dataclasses.dataclass(frozen=True)
class BoundingBox:
	x: float = 0.0
	y: float = 0.0
	width: float = 0.0
	height: float = 0.0


@dataclasses.dataclass(frozen=True)
class Color:
	r: float
	g: float
	b: float
	a: float = 1.0


@dataclasses.dataclass(frozen=True)
class Fill:
	fill_type: str
	color: Color | None = None


@dataclasses.dataclass(frozen=True)
class TextStyle:
	font_family: str | None = None
	font_size: float | None = None


@dataclasses.dataclass(frozen=True)
class DocumentNode:
	node_id: str
	name: str
	kind: str
	node_type: str = ""
	box: BoundingBox | None = None
	fills: tuple[Fill, ...] | None = None
	strokes: tuple[Fill, ...] | None = None
	text: str | None = None
	style: TextStyle | None = None
	children: tuple["DocumentNode", ...] = ()
	raw: dict = dataclasses.field(default_factory=dict, repr=False, compare=False)


@dataclasses.dataclass(frozen=True)
class Document:
	name: str
	pages: tuple[DocumentNode, ...]
	raw: dict = dataclasses.field(default_factory=dict, repr=False, compare=False)


#============================================
def parse_number(value: object, default_value: float) -> float:
	"""
	Parse a JSON number into a float.

	Args:
		value: Raw JSON value.
		default_value: Fallback when the value is missing or not numeric.

	Returns:
		Parsed float value.
	"""
	if value is None or isinstance(value, bool):
		return default_value
	if isinstance(value, (int, float)):
		return float(value)
	return default_value


#============================================
def parse_bounding_box(payload: object) -> BoundingBox | None:
	"""
	Parse an absoluteBoundingBox entry.

	Args:
		payload: Raw box dict or None.

	Returns:
		BoundingBox or None when the node has no geometry.
	"""
	if not isinstance(payload, dict):
		return None
	return BoundingBox(
		x=parse_number(payload.get("x"), 0.0),
		y=parse_number(payload.get("y"), 0.0),
		width=parse_number(payload.get("width"), 0.0),
		height=parse_number(payload.get("height"), 0.0),
	)


#============================================
def parse_color(payload: object) -> Color | None:
	"""
	Parse an RGBA color dict with channels in the 0.0-1.0 range.

	Args:
		payload: Raw color dict.

	Returns:
		Color, or None when any of r, g, b is missing.
	"""
	if not isinstance(payload, dict):
		return None
	channels = []
	for key in ("r", "g", "b"):
		value = payload.get(key)
		if isinstance(value, bool) or not isinstance(value, (int, float)):
			return None
		channels.append(float(value))
	alpha = parse_number(payload.get("a"), 1.0)
	return Color(r=channels[0], g=channels[1], b=channels[2], a=alpha)


#============================================
def parse_paint_list(payload: object) -> tuple[Fill, ...] | None:
	"""
	Parse a fills or strokes list.

	Args:
		payload: Raw list of paint dicts.

	Returns:
		Tuple of Fill entries, or None when the field is absent.
	"""
	if not isinstance(payload, list):
		return None
	paints: list[Fill] = []
	for entry in payload:
		if not isinstance(entry, dict):
			paints.append(Fill(fill_type=""))
			continue
		paints.append(
			Fill(
				fill_type=str(entry.get("type", "")),
				color=parse_color(entry.get("color")),
			)
		)
	return tuple(paints)


#============================================
def parse_text_style(payload: object) -> TextStyle | None:
	"""
	Parse the typography part of a node style.

	Args:
		payload: Raw style dict.

	Returns:
		TextStyle or None.
	"""
	if not isinstance(payload, dict):
		return None
	font_family = payload.get("fontFamily")
	if not isinstance(font_family, str):
		font_family = None
	font_size = payload.get("fontSize")
	if isinstance(font_size, bool) or not isinstance(font_size, (int, float)):
		font_size = None
	else:
		font_size = float(font_size)
	return TextStyle(font_family=font_family, font_size=font_size)


#============================================
def build_node(payload: dict, children: tuple[DocumentNode, ...]) -> DocumentNode:
	"""
	Build one node from its raw dict and already parsed children.

	Args:
		payload: Raw node dict from the files API.
		children: Parsed child nodes in stored order.

	Returns:
		DocumentNode.
	"""
	node_type = payload.get("type")
	if not isinstance(node_type, str):
		node_type = ""
	text = payload.get("characters")
	if text is not None and not isinstance(text, str):
		text = str(text)
	return DocumentNode(
		node_id=str(payload.get("id", "")),
		name=str(payload.get("name", "")),
		kind=NODE_KINDS.get(node_type, KIND_CONTAINER),
		node_type=node_type,
		box=parse_bounding_box(payload.get("absoluteBoundingBox")),
		fills=parse_paint_list(payload.get("fills")),
		strokes=parse_paint_list(payload.get("strokes")),
		text=text,
		style=parse_text_style(payload.get("style")),
		children=children,
		raw=payload,
	)


#============================================
def parse_node(payload: dict) -> DocumentNode:
	"""
	Parse a raw Figma node and its descendants.

	Nodes are visited with an explicit stack, so nesting depth is not
	bounded by the interpreter recursion limit. Children are built
	before their parent.

	Args:
		payload: Raw node dict from the files API.

	Returns:
		DocumentNode tree.
	"""
	# pre-order list of (payload, parent index)
	entries: list[tuple[dict, int]] = []
	stack: list[tuple[dict, int]] = [(payload, -1)]
	while stack:
		current, parent_index = stack.pop()
		index = len(entries)
		entries.append((current, parent_index))
		raw_children = current.get("children")
		if isinstance(raw_children, list):
			for child in reversed(raw_children):
				if isinstance(child, dict):
					stack.append((child, index))

	children_by_index: list[list[DocumentNode]] = [[] for _ in entries]
	node = None
	for index in range(len(entries) - 1, -1, -1):
		current, parent_index = entries[index]
		# later siblings are built first
		children = tuple(reversed(children_by_index[index]))
		node = build_node(current, children)
		if parent_index >= 0:
			children_by_index[parent_index].append(node)
	return node


#============================================
def parse_document(payload: dict) -> Document:
	"""
	Parse a full files API response.

	Args:
		payload: Decoded JSON response.

	Returns:
		Document with its pages.
	"""
	root = payload.get("document")
	pages: list[DocumentNode] = []
	if isinstance(root, dict):
		raw_pages = root.get("children")
		if isinstance(raw_pages, list):
			for page in raw_pages:
				if isinstance(page, dict):
					pages.append(parse_node(page))
	name = payload.get("name")
	if not isinstance(name, str):
		name = ""
	return Document(name=name, pages=tuple(pages), raw=payload)


#============================================
def parse_document_json(data: str | bytes) -> Document:
	"""
	Decode and parse a serialized document snapshot.

	Args:
		data: JSON text or bytes.

	Returns:
		Document.

	Raises:
		DocumentParseError: On invalid or too deeply nested JSON, or a
			non-object payload.
	"""
	try:
		payload = json.loads(data)
	except (TypeError, ValueError) as error:
		raise DocumentParseError(f"Invalid document JSON: {error}") from error
	except RecursionError as error:
		raise DocumentParseError("Document JSON is nested too deeply to decode") from error
	if not isinstance(payload, dict):
		raise DocumentParseError("Document JSON must be an object")
	return parse_document(payload)


#============================================
def find_page(document: Document | None, page_id: str | None) -> DocumentNode | None:
	"""
	Find the selected page, falling back to the first page.

	Args:
		document: Parsed document or None.
		page_id: Selected page id or None.

	Returns:
		Page node or None when the document has no pages.
	"""
	if document is None or not document.pages:
		return None
	if page_id is not None:
		for page in document.pages:
			if page.node_id == page_id:
				return page
	return document.pages[0]
