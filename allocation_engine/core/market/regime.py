"""
Market Regime

Classifies a market metrics snapshot into one discrete regime and
reweights an allocation with the regime's scale factors.
"""
from types import MappingProxyType
from typing import Mapping

from allocation_engine.core.portfolio.allocation import (
    AllocationWeights,
    normalize_weights,
    scale_weights,
)
from allocation_engine.core.portfolio.risk_profiles import AssetClass
from allocation_engine.schemas.allocation import (
    InterestRateLevel,
    MarketCondition,
    MarketMetrics,
    TrendDirection,
)
from allocation_engine.utils.exceptions import ConfigurationError
from allocation_engine.utils.logger import get_logger


logger = get_logger(__name__)


# Classification thresholds
HIGH_VOLATILITY_INDEX = 30
LOW_VOLATILITY_INDEX = 12
CRISIS_VOLATILITY_INDEX = 40
CRISIS_SENTIMENT = 20
CRISIS_CREDIT_SPREAD = 500  # bps
BULL_MIN_STRENGTH = 60
BULL_MIN_SENTIMENT = 60
BEAR_MAX_STRENGTH = 40
BEAR_MAX_SENTIMENT = 40

HIGH_INFLATION_RATE = 4.0


REGIME_SCALE_FACTORS: Mapping[MarketCondition, Mapping[AssetClass, float]] = MappingProxyType({
    # Shift to defensive assets
    MarketCondition.CRISIS: {
        AssetClass.EQUITIES: 0.5,
        AssetClass.OPTIONS: 0.3,
        AssetClass.FUTURES: 0.2,
        AssetClass.ETF: 1.5,
        AssetClass.CRYPTO: 0.1,
    },
    MarketCondition.HIGH_VOLATILITY: {
        AssetClass.OPTIONS: 0.7,
        AssetClass.FUTURES: 0.7,
        AssetClass.CRYPTO: 0.5,
        AssetClass.ETF: 1.2,
    },
    MarketCondition.LOW_VOLATILITY: {
        AssetClass.EQUITIES: 1.1,
        AssetClass.OPTIONS: 1.2,
        AssetClass.CRYPTO: 1.3,
    },
    MarketCondition.BULL: {
        AssetClass.EQUITIES: 1.2,
        AssetClass.OPTIONS: 1.1,
        AssetClass.CRYPTO: 1.2,
        AssetClass.ETF: 0.9,
    },
    MarketCondition.BEAR: {
        AssetClass.EQUITIES: 0.7,
        AssetClass.OPTIONS: 0.8,
        AssetClass.CRYPTO: 0.6,
        AssetClass.ETF: 1.3,
        AssetClass.FOREX: 1.2,
    },
    # Favor income and options strategies
    MarketCondition.SIDEWAYS: {
        AssetClass.OPTIONS: 1.2,
        AssetClass.EQUITIES: 0.95,
    },
})

INFLATION_SCALE_FACTORS = MappingProxyType({AssetClass.CRYPTO: 1.1, AssetClass.ETF: 0.9})
HIGH_RATE_SCALE_FACTORS = MappingProxyType({AssetClass.EQUITIES: 0.9, AssetClass.ETF: 1.1})


def classify_market_condition(metrics: MarketMetrics) -> MarketCondition:
    """
    Map market metrics to a regime.
    
    Checks run in a fixed order and the first match wins. The volatility
    checks run before the crisis check, so a volatility index above 30
    always reads as HIGH_VOLATILITY even when sentiment or credit spreads
    are at crisis levels.
    """
    if metrics.volatility_index > HIGH_VOLATILITY_INDEX:
        return MarketCondition.HIGH_VOLATILITY
    
    if metrics.volatility_index < LOW_VOLATILITY_INDEX:
        return MarketCondition.LOW_VOLATILITY
    
    if (
        metrics.volatility_index > CRISIS_VOLATILITY_INDEX
        or metrics.sentiment_score < CRISIS_SENTIMENT
        or metrics.credit_spread > CRISIS_CREDIT_SPREAD
    ):
        return MarketCondition.CRISIS
    
    if (
        metrics.trend_direction == TrendDirection.UP
        and metrics.market_strength > BULL_MIN_STRENGTH
        and metrics.sentiment_score > BULL_MIN_SENTIMENT
    ):
        return MarketCondition.BULL
    
    if (
        metrics.trend_direction == TrendDirection.DOWN
        and metrics.market_strength < BEAR_MAX_STRENGTH
        and metrics.sentiment_score < BEAR_MAX_SENTIMENT
    ):
        return MarketCondition.BEAR
    
    return MarketCondition.SIDEWAYS


def adjust_for_market_conditions(
    weights: Mapping[AssetClass, float],
    condition: MarketCondition,
    metrics: MarketMetrics,
) -> AllocationWeights:
    """
    Apply regime scale factors plus inflation and rate tilts, then renormalize.
    """
    factors = REGIME_SCALE_FACTORS.get(condition)
    if factors is None:
        raise ConfigurationError(
            f"No scale factors for market condition: {condition}",
            details={"condition": str(condition)},
        )
    
    adjusted = scale_weights(weights, factors)
    
    # High inflation - favor real assets
    if metrics.inflation_rate > HIGH_INFLATION_RATE:
        adjusted = scale_weights(adjusted, INFLATION_SCALE_FACTORS)
    
    # High rates - favor fixed income over growth
    if metrics.interest_rate_level == InterestRateLevel.HIGH:
        adjusted = scale_weights(adjusted, HIGH_RATE_SCALE_FACTORS)
    
    logger.debug(f"Applied {condition.value} scale factors")
    return normalize_weights(adjusted)
