"""
Utility classes for the chain-data side of the quoting engine.

Includes:
- TTLCache: explicit, injectable cache for reserves / RPC reads
- calculate_gas_with_buffer: integer-only gas limit scaling
- GasEstimator: gas estimation with buffer and per-operation fallbacks

Калькуляторы (quote_engine.math) ничего не кэшируют; кэш передаётся
тому, кто читает данные из сети (PairReader).
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

from web3 import Web3
from web3.exceptions import ContractLogicError

from config import APPROVAL_GAS_LIMIT, DEFAULT_GAS_LIMIT, GAS_BUFFER_PERCENT

logger = logging.getLogger(__name__)

_MISSING = object()


class TTLCache:
    """
    Thread-safe cache with a fixed time-to-live.

    Usage:
        cache = TTLCache(ttl_seconds=300)
        reserves = cache.get("pool-info")
        if reserves is None:
            reserves = reader.get_reserves(force_refresh=True)
            cache.set("pool-info", reserves)
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[Hashable, Tuple[Any, float]] = {}

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Значение, если оно моложе TTL; иначе default (устаревшее удаляется)."""
        with self._lock:
            entry = self._entries.get(key, _MISSING)
            if entry is _MISSING:
                return default
            value, stored_at = entry
            age = self._clock() - stored_at
            if age >= self.ttl_seconds:
                del self._entries[key]
                logger.debug(f"Cache entry {key!r} expired ({age:.1f}s old)")
                return default
            return value

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock())

    def age(self, key: Hashable) -> Optional[float]:
        """Возраст записи в секундах или None."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            return self._clock() - entry[1]

    def invalidate(self, key: Hashable) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def calculate_gas_with_buffer(estimate: int, buffer_percent: int = GAS_BUFFER_PERCENT) -> int:
    """
    Gas limit с запасом, только целочисленная арифметика.

    Args:
        estimate: Оценка газа (int)
        buffer_percent: Итоговый процент от оценки (120 = +20%)

    Raises:
        TypeError: если аргументы не int
        ValueError: если аргументы отрицательные

    Example:
        >>> calculate_gas_with_buffer(100000, 120)
        120000
    """
    for name, v in (("estimate", estimate), ("buffer_percent", buffer_percent)):
        if isinstance(v, bool) or not isinstance(v, int):
            raise TypeError(f"{name} must be int, got {type(v).__name__}")
        if v < 0:
            raise ValueError(f"{name} must be non-negative, got {v}")
    return estimate * buffer_percent // 100


class GasEstimator:
    """
    Gas estimation with buffer and fallbacks.

    Usage:
        estimator = GasEstimator(buffer_percent=120)
        gas_limit = estimator.estimate(contract.functions.stake(...), from_address)
    """

    # Default gas limits by operation type
    DEFAULTS = {
        'approve': APPROVAL_GAS_LIMIT,
        'add_liquidity': DEFAULT_GAS_LIMIT,
        'remove_liquidity': DEFAULT_GAS_LIMIT,
        'earn_vg': DEFAULT_GAS_LIMIT,
        'burn_lp': DEFAULT_GAS_LIMIT,
    }

    def __init__(self, buffer_percent: int = GAS_BUFFER_PERCENT, max_gas: int = 3000000):
        self.buffer_percent = buffer_percent
        self.max_gas = max_gas

    def default_for(self, operation: str) -> int:
        return self.DEFAULTS.get(operation, DEFAULT_GAS_LIMIT)

    def estimate(
        self,
        contract_function,
        from_address: str,
        value: int = 0,
        operation: str = 'approve',
    ) -> int:
        """
        Оценка газа для вызова контракта.

        Args:
            contract_function: Web3 contract function (contract.functions.method(...))
            from_address: Адрес отправителя
            value: Нативная сумма в wei
            operation: Тип операции для fallback

        Returns:
            Gas limit с запасом, не больше max_gas
        """
        try:
            estimated = contract_function.estimate_gas({
                'from': Web3.to_checksum_address(from_address),
                'value': value,
            })
        except ContractLogicError as e:
            logger.warning(f"Gas estimation failed (contract error): {e}")
            return self.default_for(operation)
        except Exception as e:
            logger.warning(f"Gas estimation failed: {e}, using default for '{operation}'")
            return self.default_for(operation)

        result = min(calculate_gas_with_buffer(int(estimated), self.buffer_percent), self.max_gas)
        logger.debug(f"Gas estimated: {estimated}, with buffer: {result}")
        return result
