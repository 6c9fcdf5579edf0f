"""Supplier adapters."""

from .base import BalanceResult, BaseSupplier, CostPriceResult, PurchaseResult, StatusResult
from .codecraft import CodeCraftSupplier
from .dakazina import DataKazinaSupplier
from .dataxpress import DataXpressSupplier
from .hubnet import HubnetSupplier
from .sykesofficial import SykesOfficialSupplier

__all__ = [
    "BalanceResult",
    "BaseSupplier",
    "CostPriceResult",
    "PurchaseResult",
    "StatusResult",
    "CodeCraftSupplier",
    "DataKazinaSupplier",
    "DataXpressSupplier",
    "HubnetSupplier",
    "SykesOfficialSupplier",
]
