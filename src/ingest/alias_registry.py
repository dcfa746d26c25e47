"""Source identifier aliasing.

This module derives short display names from verbose run file names
and deduplicates them with numeric suffixes in registration order.
"""

from __future__ import annotations

import threading

from core.constants import SLOT_MARKER
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


def extract_base_name(original: str) -> str:
    """Derive the alias candidate for a source identifier.

    Directory prefixes (``/`` or ``\\``) and the trailing extension are
    removed. Names shaped like ``<digits>_<name>_Slot<rest>`` reduce to
    ``<name>``; names with only a digit prefix lose that prefix.

    Args:
        original: Raw source identifier, usually a run file path.

    Returns:
        Base alias without any deduplication suffix.
    """
    last_separator = max(original.rfind("/"), original.rfind("\\"))
    file_name = original[last_separator + 1 :]
    last_dot = file_name.rfind(".")
    if last_dot != -1:
        file_name = file_name[:last_dot]
    first_underscore = file_name.find("_")
    if first_underscore == -1:
        return file_name
    prefix = file_name[:first_underscore]
    if not (prefix.isascii() and prefix.isdigit()):
        return file_name
    slot_index = file_name.find(SLOT_MARKER, first_underscore)
    if slot_index == -1:
        return file_name[first_underscore + 1 :]
    return file_name[first_underscore + 1 : slot_index]


class AliasRegistry:
    """Thread-safe mapping from original source ids to unique aliases.

    The first original reaching a base name gets the bare base name;
    later distinct originals get ``base(1)``, ``base(2)``, and so on.
    Lookup and registration happen in one critical section.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._canonical_alias: dict[str, str] = {}
        self._alias_use_count: dict[str, int] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._canonical_alias)

    def resolve(self, original: str) -> str:
        """Return the alias for an original id, registering it if new.

        Args:
            original: Raw source identifier.

        Returns:
            Stable alias for this exact original value.
        """
        base_name = extract_base_name(original)
        with self._lock:
            alias = self._canonical_alias.get(original)
            if alias is not None:
                return alias
            use_count = self._alias_use_count.get(base_name, 0)
            alias = base_name if use_count == 0 else f"{base_name}({use_count})"
            self._alias_use_count[base_name] = use_count + 1
            self._canonical_alias[original] = alias
        _LOGGER.debug("alias_assigned", original=original, alias=alias)
        return alias

    def snapshot(self) -> dict[str, str]:
        """Return a copy of the original-to-alias mapping."""
        with self._lock:
            return dict(self._canonical_alias)
