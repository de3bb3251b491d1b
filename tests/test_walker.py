"""
Tests for the Tree Walker
"""

import asyncio

import pytest

from securelog.core.config import ScanConfiguration
from securelog.core.tree import Element, OutputElement, OutputText, render
from securelog.inspector.walker import TreeWalker
from securelog.inspector.worker import MatchWorker

TOKEN = "tok_a1b2c3d4"
OTHER_TOKEN = "tok_e5f6a7b8"


@pytest.fixture
def worker():
    worker = MatchWorker(isolated=False)
    worker.start()
    yield worker
    worker.stop()


def _walk(walker: TreeWalker, children, container=None):
    found = []
    flagged = asyncio.run(walker.inspect_children(children, container, 0, found))
    return flagged, found


class TestDepthPolicy:
    """Tests for max_depth handling."""

    def test_match_at_max_depth_is_reported(self, worker, token_catalog, nested_tree):
        """Test a secret at exactly max_depth is inspected."""
        walker = TreeWalker(ScanConfiguration(max_depth=3), token_catalog, worker)

        flagged, found = _walk(walker, nested_tree)

        assert flagged
        assert [r.raw_value for r in found] == [TOKEN]

    def test_match_below_max_depth_is_not_reported(self, worker, token_catalog, nested_tree):
        """Test a secret at max_depth + 1 is never reached."""
        walker = TreeWalker(ScanConfiguration(max_depth=2), token_catalog, worker)

        flagged, found = _walk(walker, nested_tree)

        assert not flagged
        assert found == []


class TestExclusion:
    """Tests for exclude_components."""

    def test_excluded_tag_skips_subtree(self, worker, token_catalog):
        """Test an excluded element and its descendants yield nothing."""
        tree = Element("script", props={"src": TOKEN}, children=Element("p", children=TOKEN))
        walker = TreeWalker(ScanConfiguration(exclude_components={"script"}), token_catalog, worker)

        flagged, found = _walk(walker, tree)

        assert not flagged
        assert found == []

    def test_constructed_types_are_not_excluded(self, worker, token_catalog):
        """Test exclusion only applies to primitive tag names."""

        def script():
            pass

        walker = TreeWalker(ScanConfiguration(exclude_components={"script"}), token_catalog, worker)

        flagged, found = _walk(walker, Element(script, children=TOKEN))

        assert flagged
        assert found[0].component_name == "TextNode"


class TestProps:
    """Tests for prop inspection."""

    def test_first_matching_prop_short_circuits(self, worker, token_catalog):
        """Test only the first secret-bearing prop is reported and children are skipped."""
        tree = Element(
            "a",
            props={"id": "plain", "href": f"/x?t={TOKEN}", "title": OTHER_TOKEN},
            children=Element("span", children="tok_99999999"),
        )
        walker = TreeWalker(ScanConfiguration(), token_catalog, worker)

        flagged, found = _walk(walker, tree)

        assert flagged
        assert [(r.raw_value, r.component_name) for r in found] == [(TOKEN, "a")]

    def test_non_string_props_are_ignored(self, worker, token_catalog):
        """Test only string prop values are scanned."""
        tree = Element("div", props={"data": [TOKEN], "count": 3, "onClick": print})
        walker = TreeWalker(ScanConfiguration(), token_catalog, worker)

        flagged, found = _walk(walker, tree)

        assert not flagged
        assert found == []

    def test_component_name_of_construct(self, worker, token_catalog):
        """Test props of a construct report its resolved name."""

        class UserCard:
            pass

        walker = TreeWalker(ScanConfiguration(), token_catalog, worker)

        _, found = _walk(walker, Element(UserCard, props={"apiKey": TOKEN}))

        assert found[0].component_name == "UserCard"

    def test_masked_prop_leaves_output_untouched(self, worker, token_catalog):
        """Test prop secrets are masked in the record only."""
        tree = [Element("img", props={"alt": TOKEN}, children="caption")]
        container = render(tree)
        walker = TreeWalker(ScanConfiguration(mask=True), token_catalog, worker)

        _, found = _walk(walker, tree, container)

        assert found[0].raw_value == "tok_a*****"
        assert container.text_content() == "caption"


class TestChildren:
    """Tests for child traversal."""

    def test_all_siblings_are_visited(self, worker, token_catalog):
        """Test every sibling is inspected even after one matched."""
        tree = [f"first {TOKEN}", "clean", f"third {OTHER_TOKEN}"]
        walker = TreeWalker(ScanConfiguration(), token_catalog, worker)

        flagged, found = _walk(walker, tree)

        assert flagged
        assert [r.raw_value for r in found] == [TOKEN, OTHER_TOKEN]

    def test_document_order(self, worker, token_catalog):
        """Test results follow depth-first, left-to-right order."""
        tree = [
            Element("div", children=[Element("p", children="tok_11111111"), "tok_22222222"]),
            "tok_33333333",
        ]
        walker = TreeWalker(ScanConfiguration(), token_catalog, worker)

        _, found = _walk(walker, tree)

        assert [r.raw_value for r in found] == ["tok_11111111", "tok_22222222", "tok_33333333"]

    def test_other_values_are_ignored(self, worker, token_catalog):
        """Test numbers and arbitrary objects yield nothing."""
        walker = TreeWalker(ScanConfiguration(), token_catalog, worker)

        flagged, found = _walk(walker, [42, object()])

        assert not flagged
        assert found == []


class TestTextMasking:
    """Tests for masking text nodes."""

    def test_mirrored_text_is_rewritten(self, worker, token_catalog):
        """Test the mirrored text node receives the masked value."""
        tree = [Element("p", children=f"token: {TOKEN}")]
        container = render(tree)
        walker = TreeWalker(ScanConfiguration(mask=True), token_catalog, worker)

        _, found = _walk(walker, tree, container)

        assert found[0].raw_value == "tok_a*****"
        assert container.text_content() == "token: tok_a*****"

    def test_first_occurrence_is_replaced(self, worker, token_catalog):
        """Test substitution is textual: one replacement per record."""
        text = f"{TOKEN} and {TOKEN}"
        container = render(text)
        walker = TreeWalker(ScanConfiguration(mask=True), token_catalog, worker)

        _, found = _walk(walker, text, container)

        assert len(found) == 2
        assert container.child(0).text == "tok_a***** and tok_a*****"

    def test_missing_mirror_still_reports(self, worker, token_catalog):
        """Test masking without a mirrored node still reports the record."""
        walker = TreeWalker(ScanConfiguration(mask=True), token_catalog, worker)

        flagged, found = _walk(walker, [TOKEN], OutputElement("root"))

        assert flagged
        assert found[0].raw_value == "tok_a*****"

    def test_mirror_without_raw_value_is_left_alone(self, worker, token_catalog):
        """Test a mirrored text that differs from the logical text is not touched."""
        container = OutputElement("root", [OutputText("already rendered differently")])
        walker = TreeWalker(ScanConfiguration(mask=True), token_catalog, worker)

        _walk(walker, [TOKEN], container)

        assert container.child(0).text == "already rendered differently"

    def test_mirror_element_instead_of_text(self, worker, token_catalog):
        """Test a mirrored element in a text position is not rewritten."""
        container = OutputElement("root", [OutputElement("b", [OutputText(TOKEN)])])
        walker = TreeWalker(ScanConfiguration(mask=True), token_catalog, worker)

        _walk(walker, [TOKEN], container)

        assert container.text_content() == TOKEN

    def test_no_masking_by_default(self, worker, token_catalog):
        """Test raw values and output stay intact when masking is off."""
        container = render(TOKEN)
        walker = TreeWalker(ScanConfiguration(), token_catalog, worker)

        _, found = _walk(walker, TOKEN, container)

        assert found[0].raw_value == TOKEN
        assert container.text_content() == TOKEN


def test_stale_walker_stops_dispatching(worker, token_catalog):
    """Test a walker whose scan went stale sends no more requests."""
    walker = TreeWalker(ScanConfiguration(), token_catalog, worker, is_stale=lambda: True)

    flagged, found = _walk(walker, [TOKEN, OTHER_TOKEN])

    assert not flagged
    assert found == []
