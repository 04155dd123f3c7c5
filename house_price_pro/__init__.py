"""HousePricePro: house price estimates served through an out-of-process engine."""

__version__ = "1.0.0"
