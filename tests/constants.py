from domain.base_types import CurrencyCode

USD = CurrencyCode.USD
EUR = CurrencyCode.EUR
TRY = CurrencyCode.TRY
