"""Load [tool.scenario-trace] from pyproject.toml. Infrastructure I/O only."""

import sys
from pathlib import Path

from scenario_trace.domain.constants import CONFIG_SECTION

if sys.version_info >= (3, 11):
    import tomllib as toml_lib
else:
    import tomli as toml_lib


class ConfigFileLoader:
    """
    Loads config from pyproject.toml. No top-level functions.
    """

    @staticmethod
    def load_config_from_fs(start: Path | None = None) -> tuple[dict[str, object], str]:
        """
        Walk up from start (default: CWD) to the first pyproject.toml.

        Returns (config_dict, base_path) where base_path is the directory that
        holds the pyproject.toml. When none is found the config is empty and
        base_path is the starting directory.
        """
        origin = (start or Path.cwd()).resolve()
        current_path = origin
        empty: dict[str, object] = {}
        while True:
            config_file = current_path / "pyproject.toml"
            if config_file.exists():
                try:
                    with config_file.open("rb") as f:
                        data = toml_lib.load(f)
                    tool_section = data.get("tool", {}) or {}
                    config_dict = tool_section.get(CONFIG_SECTION, {}) or {}
                    return (config_dict, str(current_path))
                except OSError:
                    pass
            if current_path.parent == current_path:
                break
            current_path = current_path.parent
        return (empty, str(origin))
