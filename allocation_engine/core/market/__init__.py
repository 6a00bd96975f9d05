"""
Market Regime Module

Regime classification from market metrics and regime-driven reweighting.
"""
from allocation_engine.core.market.regime import (
    MarketCondition,
    REGIME_SCALE_FACTORS,
    classify_market_condition,
    adjust_for_market_conditions,
)

__all__ = [
    "MarketCondition",
    "REGIME_SCALE_FACTORS",
    "classify_market_condition",
    "adjust_for_market_conditions",
]
