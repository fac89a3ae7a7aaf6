from __future__ import annotations
import dataclasses
import json
from pathlib import Path

from settings.profiles import CameraSettings, DebugSettings


SETTINGS_FILE = Path("config/livedebug.json")


class SettingsError(Exception):
    """Settings file exists but cannot be understood."""


class JsonSettingsStorage:
    def __init__(self, path: str | Path = SETTINGS_FILE):
        self.path = Path(path)

    def load(self) -> DebugSettings:
        if not self.path.exists():
            return DebugSettings()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except json.JSONDecodeError as e:
            raise SettingsError(f"{self.path}: {e}") from e

        if not isinstance(raw, dict):
            raise SettingsError(f"{self.path}: expected a JSON object")

        known = {f.name for f in dataclasses.fields(DebugSettings)}
        unknown = set(raw) - known
        if unknown:
            raise SettingsError(f"{self.path}: unknown keys {sorted(unknown)}")

        camera_raw = raw.pop("camera", {})
        try:
            camera = CameraSettings(
                width=int(camera_raw.get("width", CameraSettings.width)),
                height=int(camera_raw.get("height", CameraSettings.height)),
                fov_deg=float(camera_raw.get("fov_deg", CameraSettings.fov_deg)),
            )
            return DebugSettings(camera=camera, **raw)
        except (TypeError, ValueError, AttributeError) as e:
            raise SettingsError(f"{self.path}: {e}") from e

    def save(self, settings: DebugSettings) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(dataclasses.asdict(settings), f, indent=2)
