#!/usr/bin/env python3

import click
import pytest

from webidl_to_quill.cli_utils import PROGRAM_NAME, reconstruct_command_line


def get_click_command():
    """Helper to get Click command for testing"""
    try:
        from webidl_to_quill.webidl_to_quill import webidl_to_quill

        return webidl_to_quill
    except ImportError:
        return None


class TestCliUtils:
    """Test cases for CLI utilities"""

    def test_reconstruct_command_line_without_context(self):
        """Test command reconstruction without active Click context (fallback)"""
        click_cmd = get_click_command()
        if not click_cmd:
            pytest.skip("Click command not available")

        # Since there's no active Click context in tests, this should return fallback
        result = reconstruct_command_line(click_cmd)
        assert result == "webidl_to_quill"

    def test_reconstruct_command_line_with_context(self, tmp_path):
        """Arguments come first, default options and unset flags are left out"""
        click_cmd = get_click_command()
        if not click_cmd:
            pytest.skip("Click command not available")

        definitions = tmp_path / "dom.json"
        definitions.write_text("[]")
        ctx = click.Context(click_cmd, info_name=PROGRAM_NAME)
        ctx.params = {
            "name": "web",
            "config": None,
            "output": None,
            "force": True,
            "verbose": False,
            "paths": (str(definitions),),
        }

        with ctx:
            result = reconstruct_command_line(click_cmd)

        assert result == "webidl_to_quill dom.json --name web --force"

    def test_reconstruct_command_line_function_exists(self):
        """Test that the function exists and is callable"""
        click_cmd = get_click_command()
        if not click_cmd:
            pytest.skip("Click command not available")

        # Should not raise an exception
        result = reconstruct_command_line(click_cmd)
        assert isinstance(result, str)
        assert "webidl_to_quill" in result


if __name__ == "__main__":
    pytest.main([__file__])
