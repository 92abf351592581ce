"""
offer_reference.py — Human-readable offer references.

  service offers:      SRV-YYYYMMDD-XXXXXX   (6 uppercase alphanumerics)
  installation offers: FV-<epoch ms>         (strictly increasing per process)

The engine treats these as opaque display strings.
"""

import random
import string
import threading
import time
from datetime import date
from typing import Callable, Optional

SERVICE_PREFIX = "SRV"
INSTALLATION_PREFIX = "FV"
_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits
_SUFFIX_LENGTH = 6


def service_reference(today: Optional[date] = None, rng: Optional[random.Random] = None) -> str:
    today = today or date.today()
    rng = rng or random.SystemRandom()
    suffix = "".join(rng.choice(_SUFFIX_ALPHABET) for _ in range(_SUFFIX_LENGTH))
    return f"{SERVICE_PREFIX}-{today:%Y%m%d}-{suffix}"


class OfferNumberSequence:
    """
    Monotonic FV-<ms> numbers.  If the clock repeats or goes backwards the
    previous value + 1 is used instead.
    """

    def __init__(self, clock: Callable[[], float] = time.time, prefix: str = INSTALLATION_PREFIX):
        self._clock = clock
        self._prefix = prefix
        self._last = 0
        self._lock = threading.Lock()

    def next(self) -> str:
        with self._lock:
            now = int(self._clock() * 1000)
            if now <= self._last:
                now = self._last + 1
            self._last = now
            return f"{self._prefix}-{now}"


offer_numbers = OfferNumberSequence()
