"""
Prefix and Title Registries
===========================

Valid serial prefixes and the prefix -> title mapping printed on labels.
"""

from typing import List, Optional

from .base import JsonFileStore
from ..models import PrefixTitleEntry

DEFAULT_TITLES = [
    PrefixTitleEntry('55V', 'Dual Band'),
    PrefixTitleEntry('72V', 'Tri Band'),
    PrefixTitleEntry('55Y', 'New Dual Band'),
]


def _clean_prefixes(prefixes) -> List[str]:
    """Trim, drop empty entries and duplicates, keep order."""
    cleaned: List[str] = []
    for prefix in prefixes:
        prefix = str(prefix).strip()
        if prefix and prefix not in cleaned:
            cleaned.append(prefix)
    return cleaned


class PrefixRegistry(JsonFileStore):
    """Prefixes a serial must start with to be accepted."""

    def __init__(self, data_dir=None):
        super().__init__('prefixes', data_dir)
        self._prefixes = _clean_prefixes(self._read([]))

    def prefixes(self) -> List[str]:
        with self._lock:
            return list(self._prefixes)

    def set_prefixes(self, prefixes: List[str]) -> List[str]:
        with self._lock:
            self._prefixes = _clean_prefixes(prefixes)
            self._write(self._prefixes)
            return list(self._prefixes)

    def add(self, prefix: str) -> List[str]:
        with self._lock:
            return self.set_prefixes(self._prefixes + [prefix])

    def remove(self, prefix: str) -> List[str]:
        with self._lock:
            return self.set_prefixes([p for p in self._prefixes if p != prefix.strip()])

    def matching_prefix(self, serial: str) -> Optional[str]:
        """First configured prefix ``serial`` starts with."""
        for prefix in self.prefixes():
            if serial.startswith(prefix):
                return prefix
        return None

    def is_valid(self, serial: str) -> bool:
        return self.matching_prefix(serial) is not None


class TitleRegistry(JsonFileStore):
    """Ordered prefix -> title mapping; the first matching entry wins."""

    def __init__(self, data_dir=None):
        super().__init__('titles', data_dir)
        self._entries = [PrefixTitleEntry.from_dict(d) for d in self._read([])]

    def entries(self) -> List[PrefixTitleEntry]:
        with self._lock:
            return list(self._entries)

    def lookup(self, prefix: str) -> Optional[str]:
        """Title of the first entry whose prefix ``prefix`` starts with."""
        for entry in self.entries():
            if entry.matches(prefix):
                return entry.title
        return None

    def add(self, prefix: str, title: str) -> PrefixTitleEntry:
        """Add a mapping, replacing an existing one for the same prefix in place."""
        entry = PrefixTitleEntry(prefix.strip(), title.strip())
        with self._lock:
            for index, existing in enumerate(self._entries):
                if existing.prefix == entry.prefix:
                    self._entries[index] = entry
                    break
            else:
                self._entries.append(entry)
            self._save()
        return entry

    def remove(self, prefix: str) -> bool:
        with self._lock:
            remaining = [e for e in self._entries if e.prefix != prefix.strip()]
            removed = len(remaining) != len(self._entries)
            self._entries = remaining
            self._save()
            return removed

    def initialize_defaults(self) -> bool:
        """Install the default mappings when the registry is empty."""
        with self._lock:
            if self._entries:
                return False
            self._entries = list(DEFAULT_TITLES)
            self._save()
            return True

    def _save(self):
        self._write([e.to_dict() for e in self._entries])
