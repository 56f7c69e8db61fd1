from .numeric import decimal_sqrt, to_decimal, quantize
from .price import PoolReserves, quote_counterpart, quote_a_from_b, quote_b_from_a, price_impact, spot_price
from .liquidity import LiquidityQuote, WithdrawQuote, quote_deposit, quote_withdraw, remove_percentage
from .rewards import (
    RewardMode,
    RewardQuote,
    lp_accounting_value,
    estimate_reward,
    estimate_reward_for_create,
    estimate_reward_for_burn,
)
from .portfolio import PortfolioValuation, calculate_portfolio_value, percentage_change, calculate_apy, calculate_tvl
