"""
Shared fixtures for all tests.
"""

import logging
from decimal import Decimal
from unittest.mock import MagicMock, Mock

import pytest

from config import EngineConfig
from quote_engine.engine import QuoteEngine
from quote_engine.math.price import PoolReserves


class MockWeb3:
    """Переиспользуемый мок Web3 для тестов."""

    def __init__(self):
        self.eth = MagicMock()
        self.eth.gas_price = 5_000_000_000  # 5 gwei
        self.eth.chain_id = 56
        self.eth.block_number = 40_000_000
        self.eth.contract = MagicMock()


class FakeClock:
    """Управляемые часы для TTLCache."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def mock_w3():
    """Мок Web3 instance."""
    return MockWeb3()


@pytest.fixture
def mock_pair_contract():
    """Мок V2 пары: 1000 VC / 1 BNB, totalSupply 100 LP."""
    contract = Mock()
    contract.functions = Mock()

    contract.functions.getReserves = Mock(return_value=Mock(
        call=Mock(return_value=[1000 * 10**18, 1 * 10**18, 1_700_000_000])
    ))
    contract.functions.token0 = Mock(return_value=Mock(
        call=Mock(return_value=VC_TOKEN)
    ))
    contract.functions.totalSupply = Mock(return_value=Mock(
        call=Mock(return_value=100 * 10**18)
    ))
    contract.functions.balanceOf = Mock(return_value=Mock(
        call=Mock(return_value=5 * 10**17)
    ))
    return contract


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def reserves():
    """Пул 1000 VC / 1 BNB (цена VC = 0.001 BNB)."""
    return PoolReserves(Decimal("1000"), Decimal("1"))


@pytest.fixture
def empty_reserves():
    """Пустой пул: первое добавление ликвидности."""
    return PoolReserves(Decimal("0"), Decimal("0"))


@pytest.fixture
def engine_logger():
    return logging.getLogger("tests.engine")


@pytest.fixture
def engine(engine_logger):
    """QuoteEngine с дефолтной конфигурацией."""
    return QuoteEngine(EngineConfig(), logger=engine_logger)


# Тестовые адреса
VC_TOKEN = "0x1111111111111111111111111111111111111111"
WBNB = "0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c"
PAIR = "0x9999999999999999999999999999999999999999"
ACCOUNT = "0x1234567890123456789012345678901234567890"
