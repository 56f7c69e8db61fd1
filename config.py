"""
Configuration for the VC/BNB staking dashboard quoting engine.

Протокольные константы и настройки движка котировок.
Все значения здесь - дефолты; калькуляторы получают их параметрами
(через EngineConfig / QuoteEngine), ничего не захардкожено внутри формул.
"""

import os
from dataclasses import dataclass, fields, replace
from decimal import Decimal
from typing import Dict, Mapping, Optional


@dataclass(frozen=True)
class TokenConfig:
    """Конфигурация токена."""
    symbol: str
    decimals: int


# ============================================================
# TOKENS
# ============================================================

TOKENS: Dict[str, TokenConfig] = {
    "VC": TokenConfig(symbol="VC", decimals=18),
    "VG": TokenConfig(symbol="VG", decimals=18),
    "BNB": TokenConfig(symbol="BNB", decimals=18),
    "LP": TokenConfig(symbol="LP", decimals=18),
}

PORTFOLIO_ASSETS = ("VC", "VG", "BNB", "LP")

# ============================================================
# PROTOCOL CONSTANTS
# ============================================================

# PancakeSwap V2 pair fee: 0.25%
SWAP_FEE = Decimal("0.0025")

# 10 VG за 1 LP
DEFAULT_LP_TO_VG_RATIO = Decimal("10")

# Нормализация LP внутри reward-контракта (1e21 в wei)
LP_DIVISOR = Decimal("1000")

# ============================================================
# SLIPPAGE
# ============================================================

MIN_SLIPPAGE_PERCENT = Decimal("0")
MAX_SLIPPAGE_PERCENT = Decimal("50")
HIGH_SLIPPAGE_WARNING_PERCENT = Decimal("5")

# LP staking flow (basis points)
MIN_SLIPPAGE_BPS = 50       # 0.5%
MAX_SLIPPAGE_BPS = 1500     # 15%
DEFAULT_SLIPPAGE_BPS = 1000  # 10%

# LP pool manager flow
DEFAULT_LP_SLIPPAGE_PERCENT = Decimal("0.5")
REMOVE_PERCENTAGES = (25, 50, 75, 100)

# ============================================================
# SECURITY / INPUT
# ============================================================

MAX_INPUT_LENGTH = 20
ALLOWED_DECIMALS = 18
MAX_TRANSACTION_VALUE = Decimal("1000000")

# ============================================================
# GAS
# ============================================================

GAS_BUFFER_PERCENT = 120  # +20%
DEFAULT_GAS_LIMIT = 500000
APPROVAL_GAS_LIMIT = 100000

# ============================================================
# CACHE TTL (seconds)
# ============================================================

POOL_RESERVES_CACHE_TTL = 300
RPC_CACHE_TTL = 30

# ============================================================
# FORMAT
# ============================================================

CURRENCY_MIN_FRACTION_DIGITS = 2
CURRENCY_MAX_FRACTION_DIGITS = 6
PERCENTAGE_MAX_FRACTION_DIGITS = 2
LARGE_NUMBER_SUFFIXES = (
    (Decimal("1e12"), "T"),
    (Decimal("1e9"), "B"),
    (Decimal("1e6"), "M"),
    (Decimal("1e3"), "K"),
)


@dataclass(frozen=True)
class EngineConfig:
    """Набор констант, которые QuoteEngine передаёт в калькуляторы."""
    swap_fee: Decimal = SWAP_FEE
    reward_ratio: Decimal = DEFAULT_LP_TO_VG_RATIO
    lp_divisor: Decimal = LP_DIVISOR
    min_slippage: Decimal = MIN_SLIPPAGE_PERCENT
    max_slippage: Decimal = MAX_SLIPPAGE_PERCENT
    slippage_warning: Decimal = HIGH_SLIPPAGE_WARNING_PERCENT
    min_slippage_bps: int = MIN_SLIPPAGE_BPS
    max_slippage_bps: int = MAX_SLIPPAGE_BPS
    default_slippage_bps: int = DEFAULT_SLIPPAGE_BPS
    max_transaction_value: Decimal = MAX_TRANSACTION_VALUE
    max_input_length: int = MAX_INPUT_LENGTH
    token_decimals: int = ALLOWED_DECIMALS
    gas_buffer_percent: int = GAS_BUFFER_PERCENT
    default_gas_limit: int = DEFAULT_GAS_LIMIT
    approval_gas_limit: int = APPROVAL_GAS_LIMIT
    pool_reserves_ttl: int = POOL_RESERVES_CACHE_TTL
    rpc_cache_ttl: int = RPC_CACHE_TTL

    def __post_init__(self):
        if self.lp_divisor <= 0:
            raise ValueError(f"lp_divisor must be positive, got {self.lp_divisor}")
        if not (0 <= self.swap_fee < 1):
            raise ValueError(f"swap_fee must be in [0, 1), got {self.swap_fee}")
        if self.min_slippage_bps > self.max_slippage_bps:
            raise ValueError("min_slippage_bps must be <= max_slippage_bps")
        if self.max_input_length <= 0:
            raise ValueError("max_input_length must be positive")


DEFAULT_CONFIG = EngineConfig()

ENV_PREFIX = "QUOTE_"


def load_engine_config(env: Optional[Mapping[str, str]] = None) -> EngineConfig:
    """
    Собрать EngineConfig с переопределениями из окружения.

    Переменные вида QUOTE_<FIELD> (например QUOTE_REWARD_RATIO=12).
    .env файл загружается вызывающим кодом (main.py через python-dotenv).

    Raises:
        ValueError: если значение переменной нельзя привести к типу поля
    """
    if env is None:
        env = os.environ

    overrides = {}
    for field in fields(EngineConfig):
        raw = env.get(ENV_PREFIX + field.name.upper())
        if raw is None or raw.strip() == "":
            continue
        default = getattr(DEFAULT_CONFIG, field.name)
        try:
            if isinstance(default, Decimal):
                overrides[field.name] = Decimal(raw.strip())
            else:
                overrides[field.name] = int(raw.strip())
        except (ArithmeticError, ValueError) as e:
            raise ValueError(f"Invalid value for {ENV_PREFIX}{field.name.upper()}: {raw!r}") from e

    return replace(DEFAULT_CONFIG, **overrides)


def get_token(symbol: str) -> TokenConfig:
    """Получение токена по символу."""
    key = symbol.upper()
    if key not in TOKENS:
        raise ValueError(f"Unknown token: {symbol}")
    return TOKENS[key]
