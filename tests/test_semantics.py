"""Tests for the visibility oracle, role resolver and accessible-name chain."""

import pytest

from builders import el, find, make_doc
from reflens.dom.node import Capability
from reflens.semantics.names import accessible_name
from reflens.semantics.roles import is_interactive, resolve_role
from reflens.semantics.visibility import is_visible


# ---------------------------------------------------------------------------
# Visibility
# ---------------------------------------------------------------------------

class TestVisibility:
    def test_display_none_is_hidden(self):
        doc = make_doc(el("div", "x", css={"display": "none"}))
        assert not is_visible(find(doc, "div"))

    def test_visibility_hidden_is_hidden(self):
        doc = make_doc(el("div", "x", css={"visibility": "hidden"}))
        assert not is_visible(find(doc, "div"))

    def test_zero_opacity_is_hidden(self):
        doc = make_doc(el("div", "x", css={"opacity": "0"}))
        assert not is_visible(find(doc, "div"))

    def test_zero_area_is_hidden(self):
        doc = make_doc(el("div", "x", box={"x": 0, "y": 0, "width": 50, "height": 0}))
        assert not is_visible(find(doc, "div"))

    def test_on_screen_box_is_visible(self):
        doc = make_doc(el("div", "x"))
        assert is_visible(find(doc, "div"))

    def test_off_viewport_still_visible(self):
        # No viewport or clipping analysis.
        doc = make_doc(el("div", "x", box={"x": -5000, "y": -5000, "width": 10, "height": 10}))
        assert is_visible(find(doc, "div"))


# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------

class TestRoles:
    @pytest.mark.parametrize("tag,role", [
        ("button", "button"),
        ("nav", "navigation"),
        ("ul", "list"),
        ("li", "listitem"),
        ("textarea", "textbox"),
        ("h3", "heading"),
        ("footer", "contentinfo"),
        ("div", None),
        ("span", None),
    ])
    def test_tag_table(self, tag, role):
        doc = make_doc(el(tag, "x"))
        assert resolve_role(find(doc, tag)) == role

    def test_explicit_role_wins(self):
        doc = make_doc(el("div", "x", role="tab"))
        assert resolve_role(find(doc, "div")) == "tab"

    def test_anchor_needs_href(self):
        doc = make_doc(el("a", "Home", href="/"), el("a", "Anchor"))
        assert resolve_role(find(doc, "a", 0)) == "link"
        assert resolve_role(find(doc, "a", 1)) is None

    @pytest.mark.parametrize("input_type,role", [
        ("checkbox", "checkbox"),
        ("radio", "radio"),
        ("submit", "button"),
        ("range", "slider"),
        ("search", "searchbox"),
        ("number", "spinbutton"),
        ("password", "textbox"),
        ("color", "textbox"),
    ])
    def test_input_type_table(self, input_type, role):
        doc = make_doc(el("input", type=input_type))
        assert resolve_role(find(doc, "input")) == role

    def test_input_without_type_is_textbox(self):
        doc = make_doc(el("input"))
        assert resolve_role(find(doc, "input")) == "textbox"

    def test_select_multiple_is_listbox(self):
        doc = make_doc(el("select", props={"multiple": True}), el("select"))
        assert resolve_role(find(doc, "select", 0)) == "listbox"
        assert resolve_role(find(doc, "select", 1)) == "combobox"

    def test_section_is_region_only_when_labelled(self):
        doc = make_doc(el("section", "a", aria_label="News"), el("section", "b"))
        assert resolve_role(find(doc, "section", 0)) == "region"
        assert resolve_role(find(doc, "section", 1)) is None

    def test_img_role_depends_on_alt(self):
        doc = make_doc(el("img", alt="Logo"), el("img"))
        assert resolve_role(find(doc, "img", 0)) == "img"
        assert resolve_role(find(doc, "img", 1)) == "presentation"


class TestInteractive:
    def test_interactive_role(self):
        doc = make_doc(el("button", "Go"))
        assert is_interactive(find(doc, "button"))

    def test_click_handler(self):
        doc = make_doc(el("div", "Go", props={"onclick": True}))
        assert is_interactive(find(doc, "div"))

    def test_tabindex_zero_only(self):
        doc = make_doc(el("div", "a", tabindex="0"), el("div", "b", tabindex="-1"))
        assert is_interactive(find(doc, "div", 0))
        assert not is_interactive(find(doc, "div", 1))

    def test_content_editable(self):
        doc = make_doc(el("div", "a", props={"editable": True}))
        assert is_interactive(find(doc, "div"))

    def test_plain_div(self):
        doc = make_doc(el("div", "a"))
        assert not is_interactive(find(doc, "div"))


class TestCapability:
    @pytest.mark.parametrize("tag,input_type,capability", [
        ("input", None, Capability.TEXT_ENTRY),
        ("input", "email", Capability.TEXT_ENTRY),
        ("input", "checkbox", Capability.CHECKABLE),
        ("input", "radio", Capability.CHECKABLE),
        ("input", "file", Capability.FILE_INPUT),
        ("input", "submit", Capability.VALUED),
        ("textarea", None, Capability.TEXT_ENTRY),
        ("select", None, Capability.SELECTABLE),
        ("button", None, Capability.VALUED),
        ("div", None, Capability.NONE),
    ])
    def test_classification(self, tag, input_type, capability):
        attrs = {"type": input_type} if input_type else {}
        doc = make_doc(el(tag, **attrs))
        assert find(doc, tag).capability is capability


# ---------------------------------------------------------------------------
# Accessible names
# ---------------------------------------------------------------------------

class TestAccessibleName:
    def test_aria_label_beats_text(self):
        doc = make_doc(el("button", "Y", aria_label="X"))
        assert accessible_name(find(doc, "button")) == "X"

    def test_labelledby_joins_referenced_text(self):
        doc = make_doc(
            el("span", "Billing", id="a"),
            el("span", "Address", id="b"),
            el("input", aria_labelledby="a missing b"),
        )
        assert accessible_name(find(doc, "input")) == "Billing Address"

    def test_label_for(self):
        doc = make_doc(el("label", " Email ", for_="email"), el("input", id="email"))
        assert accessible_name(find(doc, "input")) == "Email"

    def test_wrapping_label_subtracts_own_text(self):
        doc = make_doc(el("label", "Name: ", el("input")))
        assert accessible_name(find(doc, "input")) == "Name:"

    def test_label_itself_keeps_its_text(self):
        doc = make_doc(el("label", "Name: ", el("input")))
        assert accessible_name(find(doc, "label")) == "Name:"

    def test_title_then_placeholder_then_alt(self):
        doc = make_doc(
            el("input", title="T", placeholder="P"),
            el("input", placeholder="P"),
            el("img", alt="A"),
        )
        assert accessible_name(find(doc, "input", 0)) == "T"
        assert accessible_name(find(doc, "input", 1)) == "P"
        assert accessible_name(find(doc, "img")) == "A"

    def test_whitespace_only_falls_through(self):
        doc = make_doc(el("button", "Save", aria_label="   "))
        assert accessible_name(find(doc, "button")) == "Save"

    def test_text_up_to_100_chars(self):
        doc = make_doc(el("p", "a" * 100), el("p", "b" * 101))
        assert accessible_name(find(doc, "p", 0)) == "a" * 100
        assert accessible_name(find(doc, "p", 1)) == ""

    def test_value_truncated_to_50(self):
        doc = make_doc(el("input", type="submit", props={"value": "v" * 80}))
        assert accessible_name(find(doc, "input")) == "v" * 50

    def test_value_ignored_for_plain_elements(self):
        doc = make_doc(el("div", props={"value": "x"}))
        assert accessible_name(find(doc, "div")) == ""
