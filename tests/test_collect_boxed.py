import sys

import figma_live_viewer.config
import figma_live_viewer.document
import figma_live_viewer.layout

import node_builders


#============================================
def build_tree() -> figma_live_viewer.document.DocumentNode:
	raw = node_builders.frame_node(
		"page",
		[
			node_builders.frame_node(
				"group",
				[
					node_builders.rect_node("a", node_builders.box(0, 0, 10, 10)),
					node_builders.text_node("b", None, "unboxed"),
				],
				node_type="GROUP",
			),
			node_builders.rect_node(
				"c",
				node_builders.box(20, 20, 5, 5),
				children=[node_builders.rect_node("d", node_builders.box(100, 100, 1, 1))],
			),
			node_builders.frame_node("e", [], bbox=node_builders.box(-5, -5, 1, 1)),
		],
		node_type="CANVAS",
	)
	return figma_live_viewer.document.parse_node(raw)


#============================================
def test_collect_boxed_preorder() -> None:
	"""
	Boxed nodes are returned in pre-order, at any depth.
	"""
	nodes = figma_live_viewer.layout.collect_boxed(build_tree())
	assert [node.node_id for node in nodes] == ["a", "c", "d", "e"]


#============================================
def test_collect_boxed_includes_root() -> None:
	raw = node_builders.frame_node("root", [node_builders.rect_node("x", None)], bbox=node_builders.box(0, 0, 1, 1))
	nodes = figma_live_viewer.layout.collect_boxed(figma_live_viewer.document.parse_node(raw))
	assert [node.node_id for node in nodes] == ["root"]


#============================================
def test_collect_boxed_empty() -> None:
	"""
	A tree without any bounding box yields nothing.
	"""
	raw = node_builders.frame_node("root", [node_builders.frame_node("inner", [node_builders.text_node("t", None, "")])])
	assert figma_live_viewer.layout.collect_boxed(figma_live_viewer.document.parse_node(raw)) == []
	lone = figma_live_viewer.document.parse_node({"id": "solo", "type": "FRAME"})
	assert figma_live_viewer.layout.collect_boxed(lone) == []


#============================================
def test_collect_boxed_nested_chain() -> None:
	"""
	Chains deeper than the recursion limit are collected and projected.
	"""
	raw = node_builders.rect_node("leaf", node_builders.box(0, 0, 1, 1))
	for index in range(sys.getrecursionlimit() + 200):
		raw = node_builders.frame_node(f"f{index}", [raw])
	page = figma_live_viewer.document.parse_node(raw)
	nodes = figma_live_viewer.layout.collect_boxed(page)
	assert [node.node_id for node in nodes] == ["leaf"]
	_, primitives = figma_live_viewer.layout.layout_page(page, figma_live_viewer.config.ViewportConfig())
	assert [primitive.node_id for primitive in primitives] == ["leaf"]
