# map_motion/io/config.py
from collections.abc import Mapping
from pathlib import Path

from map_motion.config.models import AppModel


def load_config(source: str | Path | Mapping) -> AppModel:
    """Validate a mapping, or read a JSON file, into the top-level AppModel."""
    if isinstance(source, Mapping):
        return AppModel.model_validate(source)
    text = Path(source).expanduser().read_text(encoding="utf-8")
    return AppModel.model_validate_json(text)
