import unittest

from markuptree import create_node, create_text_node, traverse


def _sample_tree():
    #   html
    #   +- head
    #   +- body
    #      +- div
    #      |  +- "a"
    #      |  +- span
    #      +- p
    root = create_node("html")
    root.append_child(create_node("head"))
    body, _ = root.append_child(create_node("body"))
    div, _ = body.append_child(create_node("div"))
    div.append_child(create_text_node("a"))
    div.append_child(create_node("span"))
    body.append_child(create_node("p"))
    return root


class TestTraverse(unittest.TestCase):
    def test_preorder_with_depths(self):
        pairs = [(node.kind, depth) for node, depth in traverse(_sample_tree())]
        assert pairs == [
            ("html", 1),
            ("head", 2),
            ("body", 2),
            ("div", 3),
            ("#text", 4),
            ("span", 4),
            ("p", 3),
        ]

    def test_visits_every_node_once(self):
        root = _sample_tree()
        nodes = [node for node, _ in root.traverse()]
        assert len(nodes) == 7
        assert len({id(node) for node in nodes}) == 7
        assert nodes[0] is root

    def test_depth_never_jumps_by_more_than_one(self):
        depths = [depth for _, depth in traverse(_sample_tree())]
        assert depths[0] == 1
        for previous, current in zip(depths, depths[1:]):
            assert current - previous <= 1

    def test_single_node(self):
        node = create_text_node("x")
        assert list(traverse(node)) == [(node, 1)]

    def test_traversals_are_independent(self):
        root = _sample_tree()
        first = root.traverse()
        second = root.traverse()
        assert next(first)[0] is root
        assert next(first)[0].kind == "head"
        # A fresh traversal starts over regardless of the other one
        assert next(second)[0] is root
        assert next(first)[0].kind == "body"
        assert len(list(second)) == 6

    def test_partial_consumption_is_safe(self):
        root = _sample_tree()
        walker = root.traverse()
        next(walker)
        walker.close()
        assert len(list(root.traverse())) == 7

    def test_deep_tree_does_not_recurse(self):
        root = create_node("div")
        current = root
        for _ in range(5000):
            current, _ = current.append_child(create_node("div"))
        pairs = list(traverse(root))
        assert len(pairs) == 5001
        assert pairs[-1] == (current, 5001)
