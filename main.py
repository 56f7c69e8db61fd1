"""
VC/BNB Staking Dashboard - quote calculator

Консольный калькулятор котировок:
- Добавление / вывод ликвидности по резервам пула
- Оценка VG награды за создание или сжигание LP
- Стоимость портфеля
- Перевод суммы в wei с учётом slippage
"""

import logging
import os
import sys
from dotenv import load_dotenv

from config import REMOVE_PERCENTAGES, load_engine_config
from quote_engine import PoolReserves, QuoteEngine
from quote_engine.formatting import format_currency, format_percentage, format_token_amount
from quote_engine.math.liquidity import remove_percentage
from quote_engine.math.price import quote_b_from_a

load_dotenv()

logger = logging.getLogger("quote_engine.cli")


def ask_number(prompt: str, default: str = None) -> str:
    """Спрашивать, пока не введут число."""
    while True:
        raw = input(prompt).strip()
        if not raw and default is not None:
            return default
        try:
            float(raw)
            return raw
        except ValueError:
            print("Введите число")


def ask_reserves() -> PoolReserves:
    """Резервы пула вводятся вручную (reserve VC, reserve BNB)."""
    print("\nРезервы пула (0 / 0 - пустой пул, первое добавление)")
    while True:
        reserve_a = ask_number("Reserve VC: ")
        reserve_b = ask_number("Reserve BNB: ")
        try:
            return PoolReserves(reserve_a, reserve_b)
        except ValueError as e:
            print(f"Некорректные резервы: {e}")


def deposit_calculator(engine: QuoteEngine):
    """Добавление ликвидности: оптимальные суммы, LP, доля пула."""
    print("\n" + "=" * 70)
    print("ADD LIQUIDITY")
    print("=" * 70)

    reserves = ask_reserves()
    total_supply = "0"
    if not reserves.is_empty:
        total_supply = ask_number("LP total supply: ")

    amount_a = ask_number("\nСколько VC внести: ")
    suggested_b = quote_b_from_a(amount_a, reserves)
    hint = f" [{suggested_b}]" if suggested_b is not None else ""
    amount_b = ask_number(f"Сколько BNB внести{hint}: ", default=str(suggested_b) if suggested_b is not None else None)

    quote = engine.quote_deposit(amount_a, amount_b, reserves, total_supply)

    print("\n" + "=" * 70)
    print("РЕЗУЛЬТАТ")
    print("=" * 70)

    if not quote.is_valid:
        print(f"\n FAILED: {quote.error}")
        return

    print(f"VC:            {format_token_amount(quote.amount_a, 6)}")
    print(f"BNB:           {format_token_amount(quote.amount_b, 6)}")
    print(f"LP получите:   {format_token_amount(quote.lp_tokens_to_receive, 6)}")
    print(f"Доля пула:     {format_percentage(quote.pool_share_percent)}")
    print(f"Price impact:  {format_percentage(quote.price_impact_percent)}")

    reward = engine.reward_for_create(quote.amount_a, quote.amount_b)
    if reward.is_valid:
        print(f"VG награда:    ~{reward.expected_reward} VG")

    # Суммы для addLiquidity
    bps_raw = input(f"\nSlippage (bps) [{engine.config.default_slippage_bps}]: ").strip()
    try:
        slippage_bps = int(bps_raw) if bps_raw else None
        amounts = engine.deposit_transaction_amounts(quote, slippage_bps)
    except ValueError as e:
        # AmountFormatError тоже ValueError
        print(f"\n FAILED: {e}")
        return

    print(f"\namountADesired: {amounts.amount_a_desired}")
    print(f"amountBDesired: {amounts.amount_b_desired}")
    print(f"amountAMin:     {amounts.amount_a_min}")
    print(f"amountBMin:     {amounts.amount_b_min}")


def withdraw_calculator(engine: QuoteEngine):
    """Вывод ликвидности по проценту от баланса LP."""
    print("\n" + "=" * 70)
    print("REMOVE LIQUIDITY")
    print("=" * 70)

    reserves = ask_reserves()
    total_supply = ask_number("LP total supply: ")
    balance = ask_number("Ваш баланс LP: ")

    percents = "/".join(str(p) for p in REMOVE_PERCENTAGES)
    while True:
        try:
            lp_amount = remove_percentage(balance, ask_number(f"Процент вывода ({percents}) [100]: ", default="100"))
            break
        except ValueError as e:
            print(e)

    quote = engine.quote_withdraw(lp_amount, reserves, total_supply)
    if not quote.is_valid:
        print(f"\n FAILED: {quote.error}")
        return

    reward = engine.reward_for_burn(lp_amount)

    print(f"\nLP к выводу:  {format_token_amount(lp_amount, 6)}")
    print(f"VC получите:  {format_token_amount(quote.amount_a, 6)}")
    print(f"BNB получите: {format_token_amount(quote.amount_b, 6)}")
    if reward.is_valid:
        print(f"VG за сжигание: {reward.expected_reward} VG")


def portfolio_calculator(engine: QuoteEngine):
    """Стоимость портфеля по балансам и ценам."""
    print("\n" + "=" * 70)
    print("PORTFOLIO")
    print("=" * 70)

    balances = {}
    prices = {}
    for asset in ("VC", "VG", "BNB", "LP"):
        balances[asset] = ask_number(f"Баланс {asset} [0]: ", default="0")
        prices[asset] = ask_number(f"Цена {asset} ($) [0]: ", default="0")

    valuation = engine.portfolio_value(balances, prices)

    print()
    for asset, value in valuation.breakdown.items():
        print(f"{asset:<4} {format_currency(value)}")
    print(f"\nИтого: {valuation.formatted}")


def main():
    """Главная функция."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_engine_config()
    except ValueError as e:
        print(f"Ошибка конфигурации: {e}")
        sys.exit(1)

    engine = QuoteEngine(config, logger=logger)

    print("""
    VC/BNB Staking Dashboard - Quote Calculator
    """)

    print("Выбери действие:")
    print("1. Добавление ликвидности")
    print("2. Вывод ликвидности")
    print("3. Стоимость портфеля")
    print("4. Выход")

    choice = input("\nВыбор (1-4): ").strip()

    if choice == "1":
        deposit_calculator(engine)
    elif choice == "2":
        withdraw_calculator(engine)
    elif choice == "3":
        portfolio_calculator(engine)
    elif choice == "4":
        print("Выход")
    else:
        print("Неверный выбор")


if __name__ == "__main__":
    main()
