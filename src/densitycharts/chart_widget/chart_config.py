"""
Chart config persistence for densitycharts (platformdirs + JSON).

Persisted items (schema v1):
- chart_states: list of ChartState dict representations
- theme: "light" or "dark"
- control_panel_splitter_value: left panel width in percent

Behavior:
- If config file missing or unreadable -> defaults are used
- If schema_version mismatches:
  - default: reset to defaults
  - optional: keep loaded but update version
- Unknown keys in loaded JSON are ignored with warnings

Design:
- ChartConfigData dataclass holds JSON-friendly data
- ChartConfig manager provides explicit API for load/save
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from platformdirs import user_config_dir

from densitycharts.utils.logging import get_logger
from densitycharts.chart_widget.chart_state import ChartState
from densitycharts.chart_widget.theme import ThemeMode, resolve_theme

logger = get_logger(__name__)

# Increment when you make a breaking change to the on-disk JSON schema.
SCHEMA_VERSION: int = 1

DEFAULT_APP_NAME = "densitycharts"
DEFAULT_FILENAME = "chart_config.json"


@dataclass
class ChartConfigData:
    """
    JSON-serializable config payload.

    Keep fields JSON-friendly: primitives, lists, dicts.
    """
    schema_version: int = SCHEMA_VERSION
    chart_states: list[Dict[str, Any]] = field(default_factory=list)
    theme: str = ThemeMode.LIGHT.value
    control_panel_splitter_value: float = 25

    def to_json_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "schema_version": self.schema_version,
            "chart_states": self.chart_states,
            "theme": self.theme,
            "control_panel_splitter_value": self.control_panel_splitter_value,
        }

    @classmethod
    def from_json_dict(cls, d: Dict[str, Any]) -> "ChartConfigData":
        """
        Tolerant loader:
        - ignores unknown keys
        - tolerates partially missing values
        """
        try:
            schema_version = int(d.get("schema_version", -1))
        except (TypeError, ValueError):
            logger.warning(f"Invalid schema_version {d.get('schema_version')!r} in chart config")
            schema_version = -1

        chart_states: list[Dict[str, Any]] = []
        raw_states = d.get("chart_states", [])
        if isinstance(raw_states, list):
            chart_states = [s for s in raw_states if isinstance(s, dict)]
            if len(chart_states) < len(raw_states):
                logger.warning("Ignoring chart_states entries that are not dicts")
        else:
            logger.warning("chart_states is not a list, using empty list")

        theme = resolve_theme(d.get("theme")).value

        control_panel_splitter_value = 25.0
        if "control_panel_splitter_value" in d:
            try:
                control_panel_splitter_value = float(d["control_panel_splitter_value"])
                control_panel_splitter_value = max(0.0, min(50.0, control_panel_splitter_value))
            except (TypeError, ValueError):
                logger.warning(
                    f"Invalid control_panel_splitter_value {d['control_panel_splitter_value']!r}, using default"
                )
                control_panel_splitter_value = 25.0

        known_keys = {"schema_version", "chart_states", "theme", "control_panel_splitter_value"}
        for key in d.keys():
            if key not in known_keys:
                logger.warning(f"Unknown key '{key}' in chart config, ignoring")

        return cls(
            schema_version=schema_version,
            chart_states=chart_states,
            theme=theme,
            control_panel_splitter_value=control_panel_splitter_value,
        )


class ChartConfig:
    """
    Manager for loading/saving ChartConfigData to disk.
    """

    def __init__(self, *, path: Path, data: Optional[ChartConfigData] = None):
        self.path = path
        self.data = data if data is not None else ChartConfigData()

    # -----------------------------
    # Construction / persistence
    # -----------------------------
    @staticmethod
    def default_config_path(
        app_name: str = DEFAULT_APP_NAME,
        filename: str = DEFAULT_FILENAME,
        app_author: str | None = None,
    ) -> Path:
        """
        Determine OS-appropriate per-user config path.

        macOS:   ~/Library/Application Support/densitycharts/chart_config.json
        Linux:   ~/.config/densitycharts/chart_config.json
        Windows: %APPDATA%\\densitycharts\\chart_config.json
        """
        return Path(user_config_dir(app_name, app_author)) / filename

    @classmethod
    def load(
        cls,
        *,
        config_path: Optional[Path] = None,
        app_name: str = DEFAULT_APP_NAME,
        filename: str = DEFAULT_FILENAME,
        app_author: str | None = None,
        schema_version: int = SCHEMA_VERSION,
        reset_on_version_mismatch: bool = True,
        create_if_missing: bool = False,
    ) -> "ChartConfig":
        """
        Load config from disk.

        If file doesn't exist or is unreadable -> defaults.
        If schema mismatch:
          - reset_on_version_mismatch=True -> defaults
          - else -> keep loaded but overwrite schema_version

        If create_if_missing=True and file is missing -> immediately write defaults.
        """
        path = config_path or cls.default_config_path(app_name=app_name, filename=filename, app_author=app_author)
        default_data = ChartConfigData(schema_version=schema_version)

        try:
            raw = path.read_text(encoding="utf-8")
            parsed = json.loads(raw)
            if not isinstance(parsed, dict):
                logger.warning(f"Chart config file at {path} does not contain a dict, using defaults")
                return cls(path=path, data=default_data)

            loaded = ChartConfigData.from_json_dict(parsed)

            if int(loaded.schema_version) != int(schema_version):
                if reset_on_version_mismatch:
                    logger.warning(
                        f"Chart config schema version mismatch: loaded={loaded.schema_version}, "
                        f"expected={schema_version}, resetting to defaults"
                    )
                    cfg = cls(path=path, data=default_data)
                    if create_if_missing:
                        cfg.save()
                    return cfg
                loaded.schema_version = int(schema_version)

            return cls(path=path, data=loaded)
        except FileNotFoundError:
            logger.debug(f"Chart config file not found at {path}, using defaults")
            cfg = cls(path=path, data=default_data)
            if create_if_missing:
                cfg.save()
            return cfg
        except json.JSONDecodeError as e:
            logger.warning(f"Chart config file at {path} is not valid JSON: {e}, using defaults")
            return cls(path=path, data=default_data)
        except OSError as e:
            logger.warning(f"Error reading chart config from {path}: {e}, using defaults")
            return cls(path=path, data=default_data)

    def save(self) -> None:
        """Write config to disk."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            json_str = json.dumps(self.data.to_json_dict(), indent=2)
            self.path.write_text(json_str, encoding="utf-8")
            logger.info(f"Saved chart config to {self.path}")
        except Exception as e:
            logger.error(f"Error saving chart config to {self.path}: {e}")
            raise

    def get_chart_states(self) -> list[ChartState]:
        """Get list of ChartState objects from config; entries that fail to parse are skipped."""
        result = []
        for state_dict in self.data.chart_states:
            try:
                result.append(ChartState.from_dict(state_dict))
            except (TypeError, ValueError) as e:
                logger.warning(f"Error deserializing ChartState from config: {e}")
        return result

    def set_chart_states(self, chart_states: list[ChartState]) -> None:
        """Set list of ChartState objects in config."""
        self.data.chart_states = [cs.to_dict() for cs in chart_states]

    def get_theme(self) -> ThemeMode:
        return resolve_theme(self.data.theme)

    def set_theme(self, theme: ThemeMode | str) -> None:
        self.data.theme = resolve_theme(theme).value

    def get_control_panel_splitter_value(self) -> float:
        """Get control panel splitter value (percentage for left panel, 0-50)."""
        return self.data.control_panel_splitter_value

    def set_control_panel_splitter_value(self, value: float) -> None:
        """Set control panel splitter value (percentage for left panel, 0-50)."""
        self.data.control_panel_splitter_value = max(0.0, min(50.0, value))
