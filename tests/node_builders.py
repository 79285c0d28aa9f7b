"""
Raw Figma node builders shared by tests.
"""


#============================================
def solid(r: float, g: float, b: float, a: float = 1.0) -> dict:
	return {"type": "SOLID", "color": {"r": r, "g": g, "b": b, "a": a}}


#============================================
def box(x: float, y: float, width: float, height: float) -> dict:
	return {"x": x, "y": y, "width": width, "height": height}


#============================================
def rect_node(node_id: str, bbox: dict | None, fills: list | None = None, children: list | None = None) -> dict:
	node = {"id": node_id, "name": f"Rect {node_id}", "type": "RECTANGLE"}
	if bbox is not None:
		node["absoluteBoundingBox"] = bbox
	if fills is not None:
		node["fills"] = fills
	if children is not None:
		node["children"] = children
	return node


#============================================
def text_node(node_id: str, bbox: dict | None, characters: str, style: dict | None = None) -> dict:
	node = {"id": node_id, "name": f"Text {node_id}", "type": "TEXT", "characters": characters}
	if bbox is not None:
		node["absoluteBoundingBox"] = bbox
	if style is not None:
		node["style"] = style
	return node


#============================================
def frame_node(node_id: str, children: list, bbox: dict | None = None, node_type: str = "FRAME") -> dict:
	node = {"id": node_id, "name": f"Frame {node_id}", "type": node_type, "children": children}
	if bbox is not None:
		node["absoluteBoundingBox"] = bbox
	return node


#============================================
def document_payload(pages: list, name: str = "Design") -> dict:
	return {"name": name, "document": {"id": "0:0", "type": "DOCUMENT", "children": pages}}
