"""
Anti-repetition memory for the palette generation engine.

Three independently bounded FIFO collections: recently emitted hex values,
recently used base hues and recent palette signatures. A single lock
serialises every read-modify-write so one instance can be shared across
request threads; tests inject a fresh instance instead.
"""

import threading
from collections import OrderedDict, deque
from typing import Dict, Any, List, Optional

from chromalab.config import config


def circular_hue_distance(h1: float, h2: float) -> float:
    """Shortest angular distance between two hues, in degrees [0, 180]."""
    diff = abs(h1 - h2) % 360.0
    return min(diff, 360.0 - diff)


class AntiRepetitionMemory:
    """Process-lifetime record of recent generator output."""

    def __init__(self, hex_capacity: int = 60, hue_capacity: int = 5, signature_capacity: int = 30):
        self.hex_capacity = hex_capacity
        self.hue_capacity = hue_capacity
        self.signature_capacity = signature_capacity
        self._lock = threading.RLock()
        # insertion-ordered set; re-registering does not refresh position
        self._hexes: "OrderedDict[str, None]" = OrderedDict()
        self._hues: deque = deque(maxlen=hue_capacity)
        self._signatures: deque = deque(maxlen=signature_capacity)

    # -- hex history ------------------------------------------------------

    def register_hex(self, hex_color: str) -> None:
        key = hex_color.upper()
        with self._lock:
            if key in self._hexes:
                return
            self._hexes[key] = None
            while len(self._hexes) > self.hex_capacity:
                self._hexes.popitem(last=False)

    def contains_hex(self, hex_color: str) -> bool:
        with self._lock:
            return hex_color.upper() in self._hexes

    # -- base hue history -------------------------------------------------

    def register_hue(self, hue: float) -> None:
        with self._lock:
            self._hues.append(hue % 360.0)

    def hue_recently_used(self, hue: float, zone: float = 30.0) -> bool:
        """True when hue lies within `zone` degrees of any recent base hue."""
        with self._lock:
            return any(circular_hue_distance(hue, recent) < zone for recent in self._hues)

    # -- signature history ------------------------------------------------

    def register_signature(self, signature: str) -> None:
        with self._lock:
            self._signatures.append(signature)

    def contains_signature(self, signature: str) -> bool:
        with self._lock:
            return signature in self._signatures

    # -- inspection -------------------------------------------------------

    def recent_hexes(self) -> List[str]:
        with self._lock:
            return list(self._hexes)

    def recent_hues(self) -> List[float]:
        with self._lock:
            return list(self._hues)

    def recent_signatures(self) -> List[str]:
        with self._lock:
            return list(self._signatures)

    def clear(self) -> None:
        with self._lock:
            self._hexes.clear()
            self._hues.clear()
            self._signatures.clear()

    def snapshot(self) -> Dict[str, Any]:
        """Sizes and capacities, for the metrics endpoint."""
        with self._lock:
            return {
                "hexes": len(self._hexes),
                "hex_capacity": self.hex_capacity,
                "hues": [round(h, 1) for h in self._hues],
                "hue_capacity": self.hue_capacity,
                "signatures": len(self._signatures),
                "signature_capacity": self.signature_capacity,
            }


# Global memory instance
_memory: Optional[AntiRepetitionMemory] = None
_memory_lock = threading.Lock()


def get_default_memory() -> AntiRepetitionMemory:
    """Get or create the process-wide memory shared by the HTTP surface."""
    global _memory
    with _memory_lock:
        if _memory is None:
            _memory = AntiRepetitionMemory(**config.history_sizes())
        return _memory
