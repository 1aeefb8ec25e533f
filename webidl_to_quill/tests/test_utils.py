"""
Tests for the naming helpers.
"""

import pytest

from webidl_to_quill.utils import escape_keyword, is_identifier, snake_to_pascal_case, to_snake_case, variable_name


@pytest.mark.parametrize(
    "name, expected",
    [
        ("getElementById", "get_element_by_id"),
        ("HTMLElement", "html_element"),
        ("innerHTML", "inner_html"),
        ("URL", "url"),
        ("node", "node"),
        ("Node", "node"),
        ("setTimeout", "set_timeout"),
        ("WebGL2RenderingContext", "web_gl2_rendering_context"),
    ],
)
def test_to_snake_case(name, expected):
    assert to_snake_case(name) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("north", "North"),
        ("south-east", "SouthEast"),
        ("first_name", "FirstName"),
        ("actionTemplate", "ActionTemplate"),
        ("first 3 rows", "First3Rows"),
        ("", ""),
    ],
)
def test_snake_to_pascal_case(text, expected):
    assert snake_to_pascal_case(text) == expected


def test_keywords_are_escaped():
    assert escape_keyword("match") == "match_"
    assert escape_keyword("type") == "type"
    assert variable_name("self") == "self_"
    assert variable_name("useCapture") == "use_capture"


@pytest.mark.parametrize(
    "name, expected",
    [("color", True), ("_private", True), ("x2", True), ("font-size", False), ("2d", False), ("", False)],
)
def test_is_identifier(name, expected):
    assert is_identifier(name) is expected
