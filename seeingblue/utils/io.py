"""IO helpers for simulation reports."""

import json
from pathlib import Path
from typing import Any

import yaml


def save_json(obj: Any, file_path: str, indent: int = 2) -> None:
    """Save object as JSON."""
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(obj, f, indent=indent, ensure_ascii=False)


def save_yaml(obj: Any, file_path: str) -> None:
    """Save object as YAML."""
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(obj, f, default_flow_style=False, allow_unicode=True, sort_keys=False)
