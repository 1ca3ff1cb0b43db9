from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

from deskview.core.audio import DEFAULT_VOLUME, SOUND_NAMES

CONFIG_PATH = Path("config.yaml")


def _load_yaml(path: Path) -> dict:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        return {}
    return data


def load_config(path: str | Path | None = None) -> Dict[str, Any]:
    data = _load_yaml(Path(path) if path is not None else CONFIG_PATH)
    data.setdefault("desks_file", "data/desks.json")
    data.setdefault("submissions_file", "data/submissions.json")
    data.setdefault("effects_enabled", True)
    data.setdefault("log_level", "INFO")

    audio = data.get("audio")
    if not isinstance(audio, dict):
        audio = {}
    audio.setdefault("default_volume", DEFAULT_VOLUME)
    sounds = audio.get("sounds")
    if not isinstance(sounds, dict):
        sounds = {}
    for name in SOUND_NAMES:
        sounds.setdefault(name, f"sounds/{name}.mp3")
    audio["sounds"] = sounds
    data["audio"] = audio
    return data


def save_config(config: Dict[str, Any], path: str | Path | None = None) -> None:
    target = Path(path) if path is not None else CONFIG_PATH
    with target.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(config, handle, sort_keys=True)


__all__ = ["CONFIG_PATH", "load_config", "save_config"]
