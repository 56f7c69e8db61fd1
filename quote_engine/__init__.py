from .engine import QuoteEngine, DepositAmounts
from .math.price import PoolReserves
from .units import AmountFormatError, BaseUnitAmount, DecimalAmount
from .validation import ValidationResult
