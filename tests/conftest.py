"""Shared test fixtures."""

import pytest

from stylebridge.core.registry import StylingRegistry, reset_styling_registry


@pytest.fixture
def registry():
    """Fresh styling registry."""
    return StylingRegistry()


@pytest.fixture(autouse=True)
def _reset_global_registry():
    yield
    reset_styling_registry()


@pytest.fixture
def recorder():
    """on_element callback that records (tag, props) calls."""
    calls = []

    def on_element(tag, props):
        calls.append((tag, props))

    on_element.calls = calls
    return on_element


@pytest.fixture
def sample_markdown():
    """Document exercising headings, links, inline HTML, and a denylisted tag."""
    return (
        "# Guide\n"
        "\n"
        "Read the [setup notes](../setup) or [visit us](https://example.com).\n"
        "\n"
        "<span\n"
        "   class=\"hint\">Inline hint</span>\n"
        "\n"
        "<script>alert('x')</script>\n"
        "\n"
        "- one\n"
        "- two\n"
    )


@pytest.fixture
def theme_dir(tmp_path):
    """Directory with two theme files and one broken file."""
    themes = tmp_path / "themes"
    themes.mkdir()
    (themes / "light.yaml").write_text(
        "colors:\n"
        "  background: '#ffffff'\n"
        "  text: '#111111'\n"
    )
    (themes / "dark.yml").write_text(
        "name: midnight\n"
        "colors:\n"
        "  background: '#000000'\n"
    )
    (themes / "broken.yaml").write_text("colors: [unclosed\n")
    return themes
