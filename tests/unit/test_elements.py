"""Tests for the element tree."""

from stylebridge.render.elements import Element, closest, create_element, path_to


class TestCreateElement:
    """Tests for create_element."""

    def test_basic(self):
        el = create_element("p", {"className": "lead"}, "hello")
        assert el.tag == "p"
        assert el.props == {"className": "lead"}
        assert el.children == ["hello"]

    def test_props_copied(self):
        props = {"id": "a"}
        el = create_element("div", props)
        props["id"] = "b"
        assert el.props == {"id": "a"}

    def test_flattens_and_drops_none(self):
        inner = create_element("em", None, "x")
        el = create_element("p", None, ["a", None, [inner, False]], "b")
        assert el.children == ["a", inner, "b"]

    def test_non_string_children_stringified(self):
        assert create_element("span", None, 42).children == ["42"]


class TestElement:
    """Tests for Element traversal and serialization."""

    def _tree(self):
        self.em = create_element("em", {}, "world")
        self.p = create_element("p", {}, "hello ", self.em)
        self.root = create_element("div", {}, self.p, create_element("hr"))
        return self.root

    def test_iter_document_order(self):
        root = self._tree()
        assert [el.tag for el in root.iter()] == ["div", "p", "em", "hr"]

    def test_find_and_find_all(self):
        root = self._tree()
        assert root.find("em") is self.em
        assert root.find("table") is None
        assert root.find_all("hr")[0].tag == "hr"

    def test_text_content(self):
        assert self._tree().text_content() == "hello world"

    def test_tag_name_for_component(self):
        def Callout(props, children):
            return None

        assert Element(Callout).tag_name == "Callout"
        assert Element("div").tag_name == "div"

    def test_to_dict_drops_callables(self):
        el = create_element("button", {"type": "submit", "onClick": lambda: None}, "Go")
        assert el.to_dict() == {
            "tag": "button",
            "props": {"type": "submit"},
            "children": ["Go"],
        }

    def test_path_to(self):
        root = self._tree()
        assert path_to(root, self.em) == [self.em, self.p, root]
        assert path_to(root, Element("em")) == []

    def test_closest(self):
        root = self._tree()
        assert closest(root, self.em, "p") is self.p
        assert closest(root, self.em, "em") is self.em
        assert closest(root, self.em, "a") is None
