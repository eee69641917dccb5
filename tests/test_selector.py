"""Tests for selector compilation, matching and querying."""

import unittest

from markuptree import (
    NodeMatcher,
    PredicateMatcher,
    SelectorError,
    compile_selector,
    create_node,
    create_text_node,
    matches,
    parse,
    query_selector,
    query_selector_all,
)


class TestCompileSelector(unittest.TestCase):
    def test_type_id_and_classes(self):
        (matcher,) = compile_selector("div#main.a.b")
        assert matcher.type == "div"
        assert matcher.id == "main"
        assert matcher.classes == ("a", "b")
        assert matcher.parent is None

    def test_class_only(self):
        (matcher,) = compile_selector(".foo")
        assert matcher.type is None
        assert matcher.id is None
        assert matcher.classes == ("foo",)

    def test_no_classes_means_none(self):
        (matcher,) = compile_selector("#x")
        assert matcher.classes is None
        assert matcher.id == "x"

    def test_names_may_contain_dash_and_underscore(self):
        (matcher,) = compile_selector("my-tag.some_class#an-id")
        assert matcher.type == "my-tag"
        assert matcher.classes == ("some_class",)
        assert matcher.id == "an-id"

    def test_descendant_chain_is_outermost_first(self):
        chain = compile_selector("  ul\tli.item   a ")
        assert [m.type for m in chain] == ["ul", "li", "a"]
        assert chain[1].classes == ("item",)

    def test_compiled_matchers_compare_equal(self):
        assert compile_selector("p.x") == [NodeMatcher(type="p", classes=["x"])]

    def test_empty_selector_raises(self):
        with self.assertRaises(SelectorError):
            compile_selector("   ")

    def test_non_string_raises_type_error(self):
        with self.assertRaises(TypeError):
            compile_selector(None)


class TestMatches(unittest.TestCase):
    def setUp(self):
        self.section = create_node("section")
        self.section.set_property("id", "top")
        self.div = create_node("div")
        self.div.set_property("id", "main")
        self.div.set_property("class", "box wide")
        self.section.append_child(self.div)

    def test_empty_matcher_matches_everything(self):
        assert NodeMatcher().matches(self.div)
        assert NodeMatcher().matches(create_text_node("x"))

    def test_type(self):
        assert self.div.matches(NodeMatcher(type="div"))
        assert not self.div.matches(NodeMatcher(type="span"))

    def test_id(self):
        assert self.div.matches(NodeMatcher(id="main"))
        assert not self.div.matches(NodeMatcher(id="other"))

    def test_all_classes_must_be_present(self):
        assert self.div.matches(NodeMatcher(classes=["wide", "box"]))
        assert not self.div.matches(NodeMatcher(classes=["box", "tall"]))

    def test_parent_constraint(self):
        assert self.div.matches(NodeMatcher(type="div", parent=NodeMatcher(id="top")))
        assert not self.div.matches(NodeMatcher(parent=NodeMatcher(type="article")))
        assert not self.section.matches(NodeMatcher(parent=NodeMatcher()))

    def test_nested_parent_mapping_is_coerced(self):
        matcher = NodeMatcher(parent={"type": "section"})
        assert isinstance(matcher.parent, NodeMatcher)
        assert self.div.matches(matcher)

    def test_callable_matcher(self):
        assert matches(self.div, lambda node: node.get_property("id") == "main")
        assert not matches(self.div, lambda node: None)
        assert PredicateMatcher(lambda node: node.kind == "div").matches(self.div)

    def test_mapping_matcher(self):
        assert matches(self.div, {"type": "div", "classes": ["box"]})
        assert not matches(self.div, {"id": "nope"})

    def test_mapping_with_unknown_key_raises(self):
        with self.assertRaises(TypeError):
            matches(self.div, {"tag": "div"})

    def test_invalid_matcher_raises_type_error(self):
        with self.assertRaises(TypeError):
            matches(self.div, "div")
        with self.assertRaises(TypeError):
            matches(self.div, 3)
        with self.assertRaises(TypeError):
            PredicateMatcher("not callable")


class TestQuery(unittest.TestCase):
    def setUp(self):
        self.root = parse(
            '<div id="root">'
            '<ul class="menu"><li class="item">One</li><li class="item active">Two</li></ul>'
            '<ul><li class="item"><ul><li class="item">Nested</li></ul></li></ul>'
            "</div>"
        )

    def test_class_selector_finds_single_span(self):
        div = create_node("div")
        span = create_node("span")
        span.set_property("class", "foo bar")
        div.append_child(span)
        result = div.query_selector_all(".foo")
        assert len(result) == 1
        assert result[0] is span

    def test_query_all_in_document_order(self):
        items = self.root.query_selector_all("li.item")
        assert [li.get_text() for li in items] == ["One", "Two", "Nested", "Nested"]

    def test_query_all_deduplicates(self):
        # The nested li is reachable through both the outer and the inner ul
        items = self.root.query_selector_all("ul li")
        assert [li.get_text() for li in items] == ["One", "Two", "Nested", "Nested"]
        assert len({id(li) for li in items}) == len(items)
        nested = self.root.query_selector_all("ul ul li")
        assert len(nested) == 1
        assert nested[0].get_text() == "Nested"

    def test_descendant_stage_excludes_matched_node(self):
        # "ul ul" must not match a ul against itself
        nested = self.root.query_selector_all("ul ul")
        assert len(nested) == 1

    def test_start_node_is_not_a_candidate(self):
        assert self.root.query_selector_all("div") == []
        assert self.root.query_selector("#root") is None

    def test_query_first(self):
        first = self.root.query_selector("li.active")
        assert first is not None
        assert first.get_text() == "Two"
        assert query_selector(self.root, "ul.menu li").get_text() == "One"

    def test_query_first_without_match(self):
        assert self.root.query_selector("table td") is None
        assert self.root.query_selector_all("table td") == []

    def test_query_with_matcher_list(self):
        chain = [NodeMatcher(type="ul", classes=["menu"]), lambda node: node.get_text() == "Two"]
        found = query_selector_all(self.root, chain)
        assert [node.kind for node in found] == ["li", "#text"]

    def test_query_with_empty_list_raises(self):
        with self.assertRaises(SelectorError):
            query_selector_all(self.root, [])

    def test_query_with_invalid_selector_type(self):
        with self.assertRaises(TypeError):
            query_selector(self.root, 12)
