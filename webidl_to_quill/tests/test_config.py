"""
Tests for the generator configuration.
"""

from __future__ import annotations

import pytest

from webidl_to_quill.pipeline import CodeGeneratorConfig, OutputConfig, OutputMode


class TestCodeGeneratorConfig:
    def test_defaults(self):
        config = CodeGeneratorConfig()

        assert config.ignore_definitions == []
        assert config.add_generation_comment is True
        assert config.mutable_references is True
        assert config.host_module == "js"
        assert config.output == OutputConfig()
        assert config.output.mode == OutputMode.ERROR_IF_EXISTS

    def test_from_dict(self):
        config = CodeGeneratorConfig.from_dict(
            {
                "ignore_definitions": ["Window"],
                "mutable_references": False,
                "host_module": "web",
                "output": {"mode": "force", "atomic_write": False},
            }
        )

        assert config.ignore_definitions == ["Window"]
        assert config.mutable_references is False
        assert config.host_module == "web"
        assert config.output.mode == OutputMode.FORCE
        assert config.output.atomic_write is False
        assert config.output.validate_before_write is True

    def test_unknown_keys_are_ignored(self):
        config = CodeGeneratorConfig.from_dict({"indent": 2})

        assert not hasattr(config, "indent")

    def test_unknown_output_mode(self):
        with pytest.raises(ValueError):
            CodeGeneratorConfig.from_dict({"output": {"mode": "merge"}})

    def test_to_dict_round_trip(self):
        config = CodeGeneratorConfig(ignore_definitions=["Document"], add_generation_comment=False)

        d = config.to_dict()

        assert d["output"]["mode"] == "error"
        assert CodeGeneratorConfig.from_dict(d) == config

    def test_configs_do_not_share_lists(self):
        first = CodeGeneratorConfig()
        first.ignore_definitions.append("Window")

        assert CodeGeneratorConfig().ignore_definitions == []
