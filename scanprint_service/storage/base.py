"""
JSON File Store
===============

Shared persistence for the registries: one JSON file per store under the
data directory. A store created without a data directory keeps its state
in memory only.
"""

import json
import threading
from pathlib import Path
from typing import Any, Optional, Union

from ..logging_config import get_logger

logger = get_logger(__name__)


class JsonFileStore:
    """Base class for stores persisted as ``<data_dir>/<name>.json``."""

    def __init__(self, name: str, data_dir: Optional[Union[str, Path]] = None):
        self.name = name
        self.data_dir = Path(data_dir) if data_dir else None
        self._lock = threading.RLock()

    def _get_data_file(self) -> Optional[Path]:
        """Get path to data file."""
        if self.data_dir is None:
            return None
        return self.data_dir / f'{self.name}.json'

    def _read(self, default: Any) -> Any:
        """Load stored data; unreadable files fall back to ``default``."""
        path = self._get_data_file()
        if path is None or not path.exists():
            return default
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load {self.name}: {e}")
            return default

    def _write(self, data: Any):
        """Persist data. Raises OSError when the file cannot be written."""
        path = self._get_data_file()
        if path is None:
            return
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)
