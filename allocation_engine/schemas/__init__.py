"""
Allocation engine input and output schemas.
"""
from allocation_engine.schemas.allocation import (
    DEFAULT_CORRELATION,
    TrendDirection,
    InterestRateLevel,
    EconomicPhase,
    MarketCondition,
    ConstraintType,
    MarketMetrics,
    AssetClassCharacteristics,
    CharacteristicsMap,
    AllocationPreferences,
    AllocationConstraint,
    AllocationInput,
    RiskLevel,
    TradeAction,
    AssetAllocation,
    PortfolioMetrics,
    RiskAnalysis,
    DiversificationMetrics,
    RebalancingAction,
    AllocationRecommendation,
)

__all__ = [
    "DEFAULT_CORRELATION",
    "TrendDirection",
    "InterestRateLevel",
    "EconomicPhase",
    "MarketCondition",
    "ConstraintType",
    "MarketMetrics",
    "AssetClassCharacteristics",
    "CharacteristicsMap",
    "AllocationPreferences",
    "AllocationConstraint",
    "AllocationInput",
    "RiskLevel",
    "TradeAction",
    "AssetAllocation",
    "PortfolioMetrics",
    "RiskAnalysis",
    "DiversificationMetrics",
    "RebalancingAction",
    "AllocationRecommendation",
]
