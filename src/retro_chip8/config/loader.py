import logging
from enum import Enum
from typing import Any, Dict, Type, TypeVar

import yaml

from retro_chip8.core.errors import ConfigError
from .models import (
    SystemConfig, MachineConfig, QuirkConfig, DisplayConfig,
    ShiftSource, JumpOffset, ScreenEdge, IndexOverflow, TimerMode,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


class ConfigLoader:
    """
    YAML形式のシステム構成ファイルを読み込み、SystemConfig に変換します。

    例::

        machine:
          cpu_hz: 700
          timer_mode: decoupled
        quirks:
          shift_source: vx
          screen_edge: wrap
        display:
          scale: 12
          foreground: "0x33FF66"
        keymap:
          x: 0x0
    """
    def load_from_file(self, path: str) -> SystemConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        logger.info("Loaded configuration from %s", path)
        return self.parse(data or {})

    def load_from_string(self, text: str) -> SystemConfig:
        return self.parse(yaml.safe_load(text) or {})

    def parse(self, data: Dict[str, Any]) -> SystemConfig:
        if not isinstance(data, dict):
            raise ConfigError("Configuration root must be a mapping.")

        machine_data = self._section(data, "machine")
        machine = MachineConfig(
            cpu_hz=self._parse_positive(machine_data.get("cpu_hz", 500), "machine.cpu_hz"),
            timer_hz=self._parse_positive(machine_data.get("timer_hz", 60), "machine.timer_hz"),
            timer_mode=self._parse_enum(TimerMode, machine_data.get("timer_mode", "decoupled"), "machine.timer_mode"),
            stack_depth=self._parse_positive(machine_data.get("stack_depth", 16), "machine.stack_depth"),
            strict=bool(machine_data.get("strict", False)),
            seed=self._parse_int(machine_data["seed"]) if machine_data.get("seed") is not None else None,
        )

        quirk_data = self._section(data, "quirks")
        quirks = QuirkConfig(
            shift_source=self._parse_enum(ShiftSource, quirk_data.get("shift_source", "vy"), "quirks.shift_source"),
            jump_offset=self._parse_enum(JumpOffset, quirk_data.get("jump_offset", "v0"), "quirks.jump_offset"),
            screen_edge=self._parse_enum(ScreenEdge, quirk_data.get("screen_edge", "clip"), "quirks.screen_edge"),
            index_overflow=self._parse_enum(IndexOverflow, quirk_data.get("index_overflow", "carry16"), "quirks.index_overflow"),
            logic_resets_flag=bool(quirk_data.get("logic_resets_flag", False)),
            load_store_increments_index=bool(quirk_data.get("load_store_increments_index", False)),
        )

        display_data = self._section(data, "display")
        display = DisplayConfig(
            scale=self._parse_positive(display_data.get("scale", 10), "display.scale"),
            foreground=self._parse_color(display_data.get("foreground", 0xFFFFFF)),
            background=self._parse_color(display_data.get("background", 0x000000)),
        )

        keymap = {}
        for name, key in self._section(data, "keymap").items():
            code = self._parse_int(key)
            if not 0 <= code <= 0xF:
                raise ConfigError(f"keymap.{name}: key code {code} is outside 0x0-0xF")
            keymap[str(name)] = code

        return SystemConfig(machine=machine, quirks=quirks, display=display, keymap=keymap)

    def _section(self, data: Dict[str, Any], name: str) -> Dict[str, Any]:
        section = data.get(name) or {}
        if not isinstance(section, dict):
            raise ConfigError(f"Section '{name}' must be a mapping.")
        return section

    def _parse_enum(self, enum_type: Type[E], value: Any, field_name: str) -> E:
        try:
            return enum_type(str(value).lower())
        except ValueError:
            choices = ", ".join(member.value for member in enum_type)
            raise ConfigError(f"{field_name}: '{value}' is not one of {choices}")

    def _parse_positive(self, value: Any, field_name: str) -> int:
        number = self._parse_int(value)
        if number <= 0:
            raise ConfigError(f"{field_name} must be positive, got {number}")
        return number

    def _parse_color(self, value: Any) -> tuple:
        rgb = self._parse_int(value)
        if not 0 <= rgb <= 0xFFFFFF:
            raise ConfigError(f"Invalid colour value: {value}")
        return ((rgb >> 16) & 0xFF, (rgb >> 8) & 0xFF, rgb & 0xFF)

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ConfigError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                if value.lower().startswith("0x"):
                    return int(value, 16)
                return int(value)
            except ValueError:
                pass
        raise ConfigError(f"Invalid integer format: {value}")
