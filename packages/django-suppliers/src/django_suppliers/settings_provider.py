"""Configuration provider for persisted supplier settings."""

import logging
import threading
import time
from typing import Callable, Dict, Optional, Tuple

from . import conf
from .models import SupplierSetting

logger = logging.getLogger(__name__)


class SupplierSettingsProvider:
    """Explicit get/set access to SupplierSetting rows.

    Reads may be served from a short-lived in-process cache (``cache_seconds``,
    0 disables it). Writes go straight to the database and invalidate the
    cached key, so a hot swap is visible to this process immediately and to
    other processes within one TTL.
    """

    def __init__(self, cache_seconds: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self.cache_seconds = conf.get_settings_cache_seconds() if cache_seconds is None else cache_seconds
        self.clock = clock
        self._cache: Dict[str, Tuple[float, Optional[str]]] = {}
        self._lock = threading.Lock()

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        if self.cache_seconds > 0:
            with self._lock:
                cached = self._cache.get(key)
                if cached is not None and cached[0] > self.clock():
                    return cached[1] if cached[1] is not None else default

        value = (
            SupplierSetting.objects.filter(key=key).values_list("value", flat=True).first()
        )

        if self.cache_seconds > 0:
            with self._lock:
                self._cache[key] = (self.clock() + self.cache_seconds, value)

        return value if value is not None else default

    def set(self, key: str, value: str) -> SupplierSetting:
        setting, _ = SupplierSetting.objects.update_or_create(key=key, defaults={"value": value})
        self.invalidate(key)
        logger.info("Supplier setting %s set to %s", key, value)
        return setting

    def invalidate(self, key: Optional[str] = None) -> None:
        with self._lock:
            if key is None:
                self._cache = {}
            else:
                self._cache.pop(key, None)
