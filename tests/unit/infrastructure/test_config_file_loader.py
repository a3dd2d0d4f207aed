"""Unit tests for ConfigFileLoader."""

from pathlib import Path

from scenario_trace.infrastructure.config_file_loader import ConfigFileLoader

PYPROJECT = """\
[project]
name = "shop"

[tool.scenario-trace]
catalog = "qa/catalog.yaml"

[[tool.scenario-trace.services]]
name = "onboarding"
test_directory = "test"
language = "typescript"
test_framework = "jest"
"""


class TestConfigFileLoader:
    """Walks up to the nearest pyproject.toml."""

    def test_finds_section_from_nested_directory(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(PYPROJECT, encoding="utf-8")
        nested = tmp_path / "services" / "onboarding"
        nested.mkdir(parents=True)

        config, base_path = ConfigFileLoader.load_config_from_fs(nested)

        assert config["catalog"] == "qa/catalog.yaml"
        assert config["services"][0]["name"] == "onboarding"
        assert Path(base_path) == tmp_path.resolve()

    def test_missing_section_gives_empty_config(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")
        config, base_path = ConfigFileLoader.load_config_from_fs(tmp_path)
        assert config == {}
        assert Path(base_path) == tmp_path.resolve()
