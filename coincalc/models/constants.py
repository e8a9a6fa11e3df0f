"""Domain constants shared by the engine, the rate state and the form.

Kept as plain module values; the form defaults mirror what the calculator
shows on first load and after a reset.
"""

from typing import Dict

BASE_UNIT = "USDT"
FIAT_CURRENCY = "IDR"

# Canonical fallback; also the value the form starts from and resets to
FALLBACK_RATE: float = 15000.0

DEFAULT_PRICE = "0.4796"

RESET_VALUES: Dict[str, str] = {
    "price": DEFAULT_PRICE,
    "holding": "0",
    "daily_accrual": "0",
    "target_date": "",
    "rate": "15000",
}

SAMPLE_VALUES: Dict[str, str] = {
    "price": DEFAULT_PRICE,
    "holding": "8578",
    "daily_accrual": "180",
}
