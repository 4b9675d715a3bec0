"""Tests for the tree projector (no tokenizer, no browser)."""

from builders import el, find, make_doc
from reflens.core.types import SnapshotOptions
from reflens.formatter.ref_registry import RefRegistry
from reflens.projector.projector import TreeProjector


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def project(doc, root=None, **options):
    registry = RefRegistry()
    projector = TreeProjector(registry)
    tree = projector.project(root if root is not None else doc.body, SnapshotOptions(**options))
    return tree, registry


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------

class TestProjectionScenarios:
    def test_single_button_interactive(self):
        doc = make_doc(el("button", "Submit"))
        tree, _ = project(doc, interactive=True)
        assert not tree.is_materialized
        assert tree.to_payload() == [{"ref": "@e1", "role": "button", "name": "Submit"}]

    def test_heading_level_from_tag(self):
        doc = make_doc(el("h2", "Pricing"))
        tree, _ = project(doc, interactive=True)
        heading = tree.nodes[0]
        assert heading.role == "heading"
        assert heading.level == 2
        assert heading.name == "Pricing"

    def test_heading_level_from_aria(self):
        doc = make_doc(el("div", "Title", role="heading", aria_level="4"))
        tree, _ = project(doc, interactive=True)
        assert tree.nodes[0].level == 4

    def test_compact_promotes_child_of_empty_wrapper(self):
        doc = make_doc(el("div", el("input", placeholder="Email")))
        tree, _ = project(doc, root=find(doc, "div"), compact=True)
        assert not tree.is_materialized
        assert [n.role for n in tree.nodes] == ["textbox"]

    def test_depth_zero_never_reaches_grandchildren(self):
        doc = make_doc(el("nav", el("ul", el("li", el("a", "Home", href="/")))))
        tree, _ = project(doc, depth=0)
        # Only the body itself is inside the depth budget.
        for node in tree.nodes:
            assert node.children == []

    def test_depth_one_keeps_children_only(self):
        doc = make_doc(el("nav", el("ul", el("li", "x"))))
        tree, _ = project(doc, depth=1)
        body = tree.node
        assert body is not None
        assert [c.role for c in body.children] == ["navigation"]
        assert body.children[0].children == []


# ---------------------------------------------------------------------------
# Pruning and elision
# ---------------------------------------------------------------------------

class TestElision:
    def test_invisible_container_hides_children(self):
        doc = make_doc(el("div", el("button", "Hidden"), css={"display": "none"}))
        tree, registry = project(doc, interactive=True)
        assert tree.is_empty
        assert tree.to_payload() is None
        assert registry.total_refs == 0

    def test_interactive_mode_skips_roleless_text(self):
        doc = make_doc(el("p", "Intro"), el("a", "Docs", href="/docs"))
        tree, _ = project(doc, interactive=True)
        assert [n.name for n in tree.nodes] == ["Docs"]

    def test_interactive_mode_keeps_role_bearing_containers(self):
        doc = make_doc(el("main", el("button", "Go")))
        tree, _ = project(doc, interactive=True)
        main = tree.nodes[0]
        assert main.role == "main"
        assert [c.role for c in main.children] == ["button"]

    def test_click_handler_div_is_kept_in_interactive_mode(self):
        doc = make_doc(el("div", "Open", props={"onclick": True}))
        tree, _ = project(doc, interactive=True)
        assert tree.nodes[0].role is None
        assert tree.nodes[0].name == "Open"

    def test_non_compact_keeps_named_wrapper(self):
        doc = make_doc(el("div", "Note"))
        tree, _ = project(doc)
        body = tree.node
        assert body.children[0].name == "Note"
        assert body.children[0].role is None

    def test_empty_leaf_is_dropped(self):
        doc = make_doc(el("div"), el("button", "Go"))
        tree, _ = project(doc)
        assert [c.role for c in tree.node.children] == ["button"]


# ---------------------------------------------------------------------------
# Attributes and refs
# ---------------------------------------------------------------------------

class TestAttributes:
    def test_checkbox_checked_state(self):
        doc = make_doc(
            el("input", type="checkbox", props={"checked": True}),
            el("div", "Dark mode", role="switch", aria_checked="false"),
        )
        tree, _ = project(doc, interactive=True)
        assert [n.checked for n in tree.nodes] == [True, False]

    def test_textbox_value_and_placeholder(self):
        doc = make_doc(el("input", placeholder="Search", props={"value": "x" * 70}))
        tree, _ = project(doc, interactive=True)
        box = tree.nodes[0]
        assert box.value == "x" * 50
        assert box.placeholder == "Search"

    def test_disabled_and_required(self):
        doc = make_doc(
            el("button", "Save", props={"disabled": True}),
            el("input", aria_required="true"),
            el("div", "Menu", role="menuitem", aria_disabled="true"),
        )
        tree, _ = project(doc, interactive=True)
        save, field, item = tree.nodes
        assert save.disabled and not save.required
        assert field.required and not field.disabled
        assert item.disabled

    def test_to_dict_omits_absent_keys(self):
        doc = make_doc(el("button", "Go"))
        tree, _ = project(doc, interactive=True)
        assert set(tree.nodes[0].to_dict()) == {"ref", "role", "name"}

    def test_refs_are_post_order_and_resolve(self):
        doc = make_doc(el("nav", el("a", "One", href="/1"), el("a", "Two", href="/2")))
        tree, registry = project(doc, interactive=True)
        nav = tree.nodes[0]
        assert [c.ref for c in nav.children] == ["@e1", "@e2"]
        assert nav.ref == "@e3"
        assert registry.resolve("@e2") is find(doc, "a", 1)
        assert registry.resolve(nav.ref) is find(doc, "nav")

    def test_identical_trees_number_identically(self):
        doc = make_doc(el("form", el("input", id="q"), el("button", "Go")))
        first, _ = project(doc)
        second, _ = project(doc)
        assert first.to_payload() == second.to_payload()

    def test_scoped_root(self):
        doc = make_doc(el("header", el("a", "Home", href="/")), el("main", el("button", "Go")))
        tree, _ = project(doc, root=find(doc, "main"), interactive=True)
        main = tree.node
        assert main.role == "main"
        assert [c.name for c in main.children] == ["Go"]

    def test_very_deep_tree(self):
        record = el("button", "Deep")
        for _ in range(3000):
            record = el("div", record)
        doc = make_doc(record)
        tree, _ = project(doc, interactive=True)
        assert [n.name for n in tree.nodes] == ["Deep"]
