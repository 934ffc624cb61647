"""
Steam wallet currencies accepted by the market price endpoint.

The market expects the numeric wallet code in the ``currency`` query
parameter; users usually know the ISO name.
"""

from enum import Enum
from typing import Optional, Union


class Currency(Enum):
    """Steam ECurrencyCode values."""
    USD = 1
    GBP = 2
    EUR = 3
    CHF = 4
    RUB = 5
    PLN = 6
    BRL = 7
    JPY = 8
    NOK = 9
    IDR = 10
    MYR = 11
    PHP = 12
    SGD = 13
    THB = 14
    VND = 15
    KRW = 16
    TRY = 17
    UAH = 18
    MXN = 19
    CAD = 20
    AUD = 21
    NZD = 22
    CNY = 23
    INR = 24
    CLP = 25
    PEN = 26
    COP = 27
    ZAR = 28
    HKD = 29
    TWD = 30
    SAR = 31
    AED = 32

    def __str__(self) -> str:
        return self.name

    @classmethod
    def from_value(cls, value: Union["Currency", str, int, None]) -> Optional["Currency"]:
        """
        Resolve a currency from its ISO name ("eur", "EUR") or wallet code (3, "3").

        Returns:
            Currency or None if unknown
        """
        if value is None:
            return None
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                return None

        text = str(value).strip().upper()
        if text.isdigit():
            return cls.from_value(int(text))
        return cls.__members__.get(text)


DEFAULT_CURRENCY = Currency.EUR
