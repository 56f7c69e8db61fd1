"""
PancakeSwap V2 pair reader.

Источник PoolReserves для калькуляторов. Единственное место с сетевыми
вызовами; без ретраев (ими занимается RPC слой). Ошибка чтения резервов
даёт PoolReserves.unavailable(), а не нулевые резервы.
"""

import logging
from decimal import Decimal
from typing import Optional

from web3 import Web3

from ..math.price import PoolReserves
from ..units import format_from_base_units
from ..utils import TTLCache
from .abis import ERC20_ABI, PAIR_ABI

logger = logging.getLogger(__name__)

RESERVES_CACHE_KEY = "pool-info"


class PairReader:
    """
    Чтение резервов и LP supply пары.

    Пример использования:
    ```python
    reader = PairReader(
        w3,
        pair_address="0x...",
        token_a=VC_ADDRESS,  # сторона A в PoolReserves
        cache=TTLCache(POOL_RESERVES_CACHE_TTL),
    )
    reserves = reader.get_reserves()
    ```
    """

    def __init__(
        self,
        w3: Web3,
        pair_address: str,
        token_a: Optional[str] = None,
        decimals_a: int = 18,
        decimals_b: int = 18,
        lp_decimals: int = 18,
        cache: Optional[TTLCache] = None,
    ):
        self.w3 = w3
        self.pair_address = Web3.to_checksum_address(pair_address)
        self.token_a = Web3.to_checksum_address(token_a) if token_a else None
        self.decimals_a = decimals_a
        self.decimals_b = decimals_b
        self.lp_decimals = lp_decimals
        self.cache = cache
        self.pair = w3.eth.contract(address=self.pair_address, abi=PAIR_ABI)
        self._token_a_is_token0: Optional[bool] = None

    def _is_token_a_first(self) -> bool:
        """token_a == token0 пары? Без token_a считаем, что A = token0."""
        if self.token_a is None:
            return True
        if self._token_a_is_token0 is None:
            token0 = Web3.to_checksum_address(self.pair.functions.token0().call())
            self._token_a_is_token0 = token0 == self.token_a
        return self._token_a_is_token0

    def get_reserves(self, force_refresh: bool = False) -> PoolReserves:
        """
        Резервы пары (A, B) в display-единицах.

        Args:
            force_refresh: Игнорировать кэш

        Returns:
            PoolReserves; при ошибке RPC - PoolReserves.unavailable()
        """
        if self.cache is not None and not force_refresh:
            cached = self.cache.get(RESERVES_CACHE_KEY)
            if cached is not None:
                logger.debug(f"Using cached pool reserves for {self.pair_address[:10]}...")
                return cached

        try:
            reserve0, reserve1, _ = self.pair.functions.getReserves().call()
            a_first = self._is_token_a_first()
        except Exception as e:
            logger.warning(f"Failed to read reserves for pair {self.pair_address[:10]}...: {e}")
            return PoolReserves.unavailable()

        raw_a, raw_b = (reserve0, reserve1) if a_first else (reserve1, reserve0)
        reserves = PoolReserves.from_base_units(raw_a, raw_b, self.decimals_a, self.decimals_b)

        if self.cache is not None:
            self.cache.set(RESERVES_CACHE_KEY, reserves)
        logger.debug(f"Pool reserves: A={reserves.reserve_a}, B={reserves.reserve_b}")
        return reserves

    def get_total_supply(self) -> Decimal:
        """totalSupply LP токена (display)."""
        raw = self.pair.functions.totalSupply().call()
        return Decimal(format_from_base_units(int(raw), self.lp_decimals))

    def balance_of(self, account: str) -> Decimal:
        """Баланс LP токена аккаунта (display)."""
        raw = self.pair.functions.balanceOf(Web3.to_checksum_address(account)).call()
        return Decimal(format_from_base_units(int(raw), self.lp_decimals))


def read_token_balance(w3: Web3, token_address: str, account: str, decimals: int = 18) -> Decimal:
    """ERC20 balanceOf в display-единицах (VC/VG для портфеля)."""
    token = w3.eth.contract(address=Web3.to_checksum_address(token_address), abi=ERC20_ABI)
    raw = token.functions.balanceOf(Web3.to_checksum_address(account)).call()
    return Decimal(format_from_base_units(int(raw), decimals))
