import json
from pathlib import Path
from typing import Any, Dict

from ..parsing.asm_types import FilterConfig, IndentMode

DEFAULT_CONFIG: Dict[str, Any] = {
    "trim": True,
    "binary": False,
    "comment_only": False,
    "directives": True,
    "labels": True,
    "indent_mode": IndentMode.MARKER.value,
    "hide_functions": None,
    # glob pattern -> path template, e.g. {"*.c": "${fileDirname}/build/${fileBasenameNoExtension}.s"}
    "associations": {},
}


class ConfigManager:
    """
    Persistent user settings in ~/.disasexpl/config.json, merged over DEFAULT_CONFIG.
    """

    def __init__(self):
        self.config_dir = Path.home() / ".disasexpl"
        self.config_file = self.config_dir / "config.json"
        self.config = self.load_config()

    def load_config(self) -> Dict[str, Any]:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        config = dict(DEFAULT_CONFIG)
        if not self.config_file.exists():
            return config
        try:
            with open(self.config_file, "r") as f:
                user_config = json.load(f)
            if isinstance(user_config, dict):
                config.update(user_config)
        except (OSError, json.JSONDecodeError) as e:
            print(f"Warning: ignoring unreadable config {self.config_file}: {e}")
        return config

    def save_config(self):
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w") as f:
            json.dump(self.config, f, indent=2)

    def get(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def set(self, key: str, value: Any):
        self.config[key] = value
        self.save_config()

    def filter_config(self, **overrides) -> FilterConfig:
        """Build the parser's FilterConfig from these settings; keyword overrides win."""
        options = {
            "trim": bool(self.get("trim", True)),
            "binary": bool(self.get("binary", False)),
            "comment_only_stripped": bool(self.get("comment_only", False)),
            "directives_stripped": bool(self.get("directives", True)),
            "dead_labels_stripped": bool(self.get("labels", True)),
            "indent_mode": IndentMode(self.get("indent_mode", IndentMode.MARKER.value)),
            "hide_function_pattern": self.get("hide_functions"),
        }
        options.update({k: v for k, v in overrides.items() if v is not None})
        return FilterConfig(**options)
