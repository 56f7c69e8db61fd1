"""
PancakeSwap V2 pair contracts module.

Reads pool reserves and LP supply for the quoting engine.
"""

from .pair import PairReader, read_token_balance
from .abis import PAIR_ABI, ERC20_ABI

__all__ = [
    'PairReader',
    'read_token_balance',
    'PAIR_ABI',
    'ERC20_ABI',
]
