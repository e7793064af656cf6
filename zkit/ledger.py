"""
zkit.ledger
-----------

In-memory ledger of encoded records keyed by a monotonically increasing id.

ids start at 1 and are handed out by `insert`, which bumps the counter and
stores the entry inside one critical section: no id is ever observed twice,
skipped, or reserved without its entry. Readers take the same lock only for
the dictionary lookup.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .codec import DEFAULT_CODEC, FieldCodec
from .errors import ErrorCode, ZkitError

log = logging.getLogger(__name__)

MAX_ID = (1 << 64) - 1


@dataclass(frozen=True)
class LedgerEntry:
    id: int
    record: Tuple


class LedgerStore:
    def __init__(self, codec: FieldCodec = DEFAULT_CODEC) -> None:
        self._codec = codec
        self._lock = threading.Lock()
        self._entries: Dict[int, LedgerEntry] = {}
        self._counter = 0

    def insert(self, record: Sequence) -> int:
        record = tuple(record)
        with self._lock:
            if self._counter >= MAX_ID:
                raise ZkitError(code=ErrorCode.LEDGER_FULL, msg="ledger id space exhausted")
            self._counter += 1
            entry_id = self._counter
            self._entries[entry_id] = LedgerEntry(id=entry_id, record=record)
        log.debug("ledger insert id=%d len=%d", entry_id, len(record))
        return entry_id

    def entry(self, entry_id: int) -> Optional[LedgerEntry]:
        with self._lock:
            return self._entries.get(entry_id)

    def get(self, entry_id: int) -> Optional[bytes]:
        e = self.entry(entry_id)
        if e is None:
            return None
        return self._codec.decode(e.record)

    def ids(self) -> List[int]:
        with self._lock:
            return sorted(self._entries)

    @property
    def last_id(self) -> int:
        with self._lock:
            return self._counter

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, entry_id: object) -> bool:
        with self._lock:
            return entry_id in self._entries


__all__ = ["LedgerEntry", "LedgerStore", "MAX_ID"]
