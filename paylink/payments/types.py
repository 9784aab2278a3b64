"""Enumerations for payment page fields."""

from enum import Enum


class Culture(str, Enum):
    """Payment page interface language."""

    EN = "en"
    RU = "ru"


class Currency(str, Enum):
    """Currencies accepted in OutSumCurrency."""

    USD = "USD"
    EUR = "EUR"
    KZT = "KZT"
