from __future__ import annotations

import json
import os
from typing import Optional

from jsonclient.domain.models import Settings


class SettingsLocal:
    """Local filesystem storage for client settings (JSON)."""

    FILENAME = "client_settings.json"

    def __init__(self, root_dir: str = ".") -> None:
        self.root = root_dir

    @property
    def path(self) -> str:
        return os.path.join(self.root, self.FILENAME)

    def save_settings(self, settings: Settings) -> None:
        os.makedirs(self.root, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(settings.to_dict(), f, ensure_ascii=False, indent=2)

    def load_settings(self) -> Optional[Settings]:
        if not os.path.exists(self.path):
            return None
        with open(self.path, "r", encoding="utf-8") as f:
            payload = json.load(f)
        if not isinstance(payload, dict):
            raise ValueError(f"{self.path}: expected a JSON object")
        return Settings.from_dict(payload)
