"""
Label Configuration Store
=========================

Named label configurations. The scan station reads the record named
``CONFIG_NAME`` ("default"); when there is none, the layout engine uses its
built-in defaults.
"""

from typing import Dict, Optional

from .base import JsonFileStore
from ..models import LabelConfiguration


class LabelConfigStore(JsonFileStore):
    """Label configurations by name."""

    def __init__(self, data_dir=None):
        super().__init__('label_configs', data_dir)
        self._configs: Dict[str, LabelConfiguration] = {
            name: LabelConfiguration.from_dict(data)
            for name, data in self._read({}).items()
        }

    def get(self, name: str) -> Optional[LabelConfiguration]:
        with self._lock:
            return self._configs.get(name)

    def all(self) -> Dict[str, LabelConfiguration]:
        with self._lock:
            return dict(self._configs)

    def save(self, name: str, config: LabelConfiguration):
        with self._lock:
            self._configs[name] = config
            self._write({k: v.to_dict() for k, v in self._configs.items()})
