from __future__ import annotations

import json
import os
from typing import Dict, Optional

from opsdesk.domain.ports import StoragePort

PREFS_FILE = "user_prefs.json"
STORAGE_ROOT_ENV = "OPSDESK_STORAGE_ROOT"


class StorageLocal(StoragePort):
    """Local filesystem storage for user prefs (JSON)."""

    def __init__(self, root_dir: Optional[str] = None) -> None:
        self.root = root_dir or os.getenv(STORAGE_ROOT_ENV) or "."

    @property
    def prefs_path(self) -> str:
        return os.path.join(self.root, PREFS_FILE)

    # ---- User prefs (JSON) ----
    def save_user_prefs(self, prefs: Dict) -> None:
        os.makedirs(self.root, exist_ok=True)
        with open(self.prefs_path, "w", encoding="utf-8") as f:
            json.dump(prefs, f, ensure_ascii=False, indent=2)

    def load_user_prefs(self) -> Dict:
        path = self.prefs_path
        if not os.path.exists(path):
            return {}
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}
