"""
Tests for the Content Tree
"""

import pytest

from securelog.core.tree import (
    Element,
    OutputElement,
    OutputText,
    iter_children,
    render,
    resolve_type_name,
    tree_from_data,
)


def Profile():  # noqa: N802 - stands in for a named component
    pass


class Card:
    display_name = "FancyCard"


class TestResolveTypeName:
    """Tests for resolve_type_name."""

    def test_primitive_tag(self):
        assert resolve_type_name("div") == "div"

    def test_function_name(self):
        assert resolve_type_name(Profile) == "Profile"

    def test_display_name_wins(self):
        assert resolve_type_name(Card) == "FancyCard"

    def test_anonymous(self):
        """Test objects without a name resolve to Unknown."""
        assert resolve_type_name(object()) == "Unknown"


class TestIterChildren:
    """Tests for iter_children."""

    def test_single_child(self):
        assert list(iter_children("text")) == ["text"]

    def test_nested_lists_are_flattened(self):
        assert list(iter_children(["a", ["b", ("c",)]])) == ["a", "b", "c"]

    def test_none_and_booleans_are_dropped(self):
        assert list(iter_children([None, "a", False, True, 0])) == ["a", 0]

    def test_absent(self):
        assert list(iter_children(None)) == []


class TestRender:
    """Tests for render."""

    def test_mirrors_structure(self):
        """Test output children line up with logical children."""
        container = render(["hello", Element("p", children=["a", "b"])])

        assert container.tag == "secure-log-container"
        assert isinstance(container.child(0), OutputText)
        paragraph = container.child(1)
        assert isinstance(paragraph, OutputElement)
        assert paragraph.tag == "p"
        assert [c.text for c in paragraph.children] == ["a", "b"]

    def test_child_out_of_range(self):
        assert render("x").child(5) is None

    def test_text_content_and_to_data(self):
        container = render([Element("p", children="a"), "b"])

        assert container.text_content() == "ab"
        assert container.to_data() == {
            "tag": "secure-log-container",
            "children": [{"tag": "p", "children": ["a"]}, "b"],
        }


class TestTreeFromData:
    """Tests for tree_from_data."""

    def test_builds_elements(self):
        tree = tree_from_data(
            [{"type": "a", "props": {"href": "/x"}, "children": ["go", {"type": "b"}]}]
        )

        assert tree == [Element("a", {"href": "/x"}, ["go", Element("b", {}, None)])]

    def test_missing_type(self):
        with pytest.raises(ValueError):
            tree_from_data({"props": {}})
