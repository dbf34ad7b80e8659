import logging
import os

import yaml
from typing import Dict, Any, Optional
from .models import (
    SystemConfig,
    MachineConfig,
    DisplayConfig,
    DebugConfig,
    DEFAULT_KEYMAP,
    TIMER_MODES,
)

logger = logging.getLogger(__name__)

KNOWN_KEYS = {
    None: {"machine", "display", "keymap", "debug", "rom"},
    "machine": {"cycles_per_second", "frame_rate", "timer_mode", "stack_depth", "seed"},
    "display": {"scale", "foreground", "background"},
    "debug": {"breakpoints"},
}

class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        config = self._parse_config(data or {})
        # romの相対パスは設定ファイルの位置を基準にする
        if config.rom and not os.path.isabs(config.rom):
            config.rom = os.path.join(os.path.dirname(os.path.abspath(path)), config.rom)
        logger.info("Loaded system config from %s", path)
        return config

    def load_from_string(self, text: str) -> SystemConfig:
        return self._parse_config(yaml.safe_load(text) or {})

    def _parse_config(self, data: Dict[str, Any]) -> SystemConfig:
        if not isinstance(data, dict):
            raise ValueError("Config root must be a mapping.")
        self._warn_unknown_keys(None, data)

        # Parse Machine
        machine_data = data.get("machine", {}) or {}
        self._warn_unknown_keys("machine", machine_data)
        timer_mode = machine_data.get("timer_mode", "realtime")
        if timer_mode not in TIMER_MODES:
            logger.warning("Unknown timer_mode '%s', falling back to 'realtime'", timer_mode)
            timer_mode = "realtime"
        machine = MachineConfig(
            cycles_per_second=self._parse_positive(machine_data.get("cycles_per_second", 700), "cycles_per_second"),
            frame_rate=self._parse_positive(machine_data.get("frame_rate", 60), "frame_rate"),
            timer_mode=timer_mode,
            stack_depth=self._parse_positive(machine_data.get("stack_depth", 16), "stack_depth"),
            seed=self._parse_optional_int(machine_data.get("seed")),
        )

        # Parse Display
        display_data = data.get("display", {}) or {}
        self._warn_unknown_keys("display", display_data)
        display = DisplayConfig(
            scale=self._parse_positive(display_data.get("scale", 10), "scale"),
            foreground=str(display_data.get("foreground", "#FFFFFF")),
            background=str(display_data.get("background", "#000000")),
        )

        # Parse Keymap (既定の対応に上書きする)
        keymap = dict(DEFAULT_KEYMAP)
        keymap_data = data.get("keymap", {}) or {}
        if not isinstance(keymap_data, dict):
            raise ValueError("Config section 'keymap' must be a mapping.")
        for char, key in keymap_data.items():
            if len(str(char)) != 1:
                raise ValueError(f"Keymap entry '{char}' must be a single character")
            index = self._parse_int(key)
            if not 0 <= index <= 0xF:
                raise ValueError(f"Keymap entry '{char}' maps to invalid key {index}")
            keymap[str(char).lower()] = index

        # Parse Debug
        debug_data = data.get("debug", {}) or {}
        self._warn_unknown_keys("debug", debug_data)
        debug = DebugConfig(
            breakpoints=[self._parse_int(bp) for bp in debug_data.get("breakpoints", []) or []]
        )

        rom = data.get("rom")
        return SystemConfig(
            machine=machine,
            display=display,
            keymap=keymap,
            debug=debug,
            rom=str(rom) if rom is not None else None,
        )

    def _warn_unknown_keys(self, section: Optional[str], data: Dict[str, Any]) -> None:
        if not isinstance(data, dict):
            raise ValueError(f"Config section '{section}' must be a mapping.")
        for key in data:
            if key not in KNOWN_KEYS[section]:
                where = f"{section}.{key}" if section else key
                logger.warning("Ignoring unknown config key '%s'", where)

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.lower().startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")

    def _parse_optional_int(self, value: Any) -> Optional[int]:
        if value is None:
            return None
        return self._parse_int(value)

    def _parse_positive(self, value: Any, name: str) -> int:
        parsed = self._parse_int(value)
        if parsed <= 0:
            raise ValueError(f"{name} must be positive, got {parsed}")
        return parsed
