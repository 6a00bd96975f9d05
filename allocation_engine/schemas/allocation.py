"""
Asset Allocation Engine - Allocation Schemas

Immutable input and output models for a single allocation call.
"""
from datetime import datetime
from enum import Enum
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from allocation_engine.core.portfolio.risk_profiles import AssetClass, RiskProfile


DEFAULT_CORRELATION = 0.3


class FrozenModel(BaseModel):
    """Base for engine values; nothing is mutated once built."""
    model_config = ConfigDict(frozen=True)
    
    def to_dict(self) -> dict:
        return self.model_dump(mode="json")


# =========================
# Input Enumerations
# =========================

class TrendDirection(str, Enum):
    UP = "UP"
    DOWN = "DOWN"
    NEUTRAL = "NEUTRAL"


class InterestRateLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class EconomicPhase(str, Enum):
    EXPANSION = "EXPANSION"
    PEAK = "PEAK"
    CONTRACTION = "CONTRACTION"
    TROUGH = "TROUGH"


class MarketCondition(str, Enum):
    """Market regimes."""
    BULL = "BULL"
    BEAR = "BEAR"
    SIDEWAYS = "SIDEWAYS"
    HIGH_VOLATILITY = "HIGH_VOLATILITY"
    LOW_VOLATILITY = "LOW_VOLATILITY"
    CRISIS = "CRISIS"


class ConstraintType(str, Enum):
    """Caller constraint kinds. Only MIN/MAX_ALLOCATION move weights."""
    MIN_ALLOCATION = "MIN_ALLOCATION"
    MAX_ALLOCATION = "MAX_ALLOCATION"
    SECTOR_LIMIT = "SECTOR_LIMIT"
    LIQUIDITY_REQ = "LIQUIDITY_REQ"
    CORRELATION_LIMIT = "CORRELATION_LIMIT"
    CONCENTRATION_LIMIT = "CONCENTRATION_LIMIT"


# =========================
# Inputs
# =========================

class MarketMetrics(FrozenModel):
    """Snapshot of market conditions supplied per call."""
    volatility_index: float = Field(..., ge=0, description="VIX or equivalent level")
    trend_direction: TrendDirection = TrendDirection.NEUTRAL
    market_strength: float = Field(50.0, ge=0, le=100)
    sentiment_score: float = Field(50.0, ge=0, le=100, description="Fear & greed index")
    interest_rate_level: InterestRateLevel = InterestRateLevel.MEDIUM
    inflation_rate: float = Field(2.5, description="Annual inflation (%)")
    credit_spread: float = Field(150.0, description="Credit spread (basis points)")
    economic_phase: EconomicPhase = EconomicPhase.EXPANSION


class AssetClassCharacteristics(FrozenModel):
    """Statistical profile of one asset class."""
    asset_class: AssetClass
    expected_return: float = Field(..., description="Annualized expected return (%)")
    volatility: float = Field(..., ge=0, description="Annualized volatility (%)")
    liquidity_score: float = Field(..., ge=0, le=100)
    sharpe_ratio: float = 0.0
    correlations: dict[AssetClass, float] = Field(default_factory=dict)
    max_drawdown: float = 0.0
    market_size: float = 0.0
    transaction_cost: float = 0.0
    minimum_investment: float = 0.0
    
    @field_validator("correlations")
    @classmethod
    def correlations_in_range(cls, v: dict[AssetClass, float]) -> dict[AssetClass, float]:
        for asset_class, corr in v.items():
            if not -1.0 <= corr <= 1.0:
                raise ValueError(f"Correlation with {asset_class.value} outside [-1, 1]: {corr}")
        return v
    
    def correlation_with(self, other: AssetClass, default: float = DEFAULT_CORRELATION) -> float:
        """Correlation to another class; 1.0 to itself, ``default`` when unknown."""
        if other == self.asset_class:
            return 1.0
        return self.correlations.get(other, default)


# Per-class statistics keyed by asset class; classes may be missing
CharacteristicsMap = Mapping[AssetClass, AssetClassCharacteristics]


class AllocationPreferences(FrozenModel):
    """Optional investor preferences."""
    preferred_asset_classes: list[AssetClass] = Field(default_factory=list)
    excluded_asset_classes: list[AssetClass] = Field(default_factory=list)
    min_allocation_per_class: Optional[float] = Field(None, ge=0, le=1)
    max_allocation_per_class: Optional[float] = Field(None, ge=0, le=1)
    esg_focused: bool = False
    target_return: Optional[float] = Field(None, description="Annualized target (%)")
    max_drawdown: Optional[float] = Field(None, description="Maximum acceptable drawdown (%)")
    rebalancing_frequency: Optional[int] = Field(None, gt=0, description="Days between rebalances")
    tax_optimized: bool = False


class AllocationConstraint(FrozenModel):
    """Explicit per-class constraint."""
    type: ConstraintType
    asset_class: Optional[AssetClass] = None
    value: float = Field(..., ge=0, le=1, description="Weight fraction")
    priority: int = Field(1, ge=1, description="1 = highest")
    hard: bool = True


class AllocationInput(FrozenModel):
    """Everything a single allocation call needs."""
    account_size: float
    market_metrics: MarketMetrics
    asset_characteristics: list[AssetClassCharacteristics] = Field(default_factory=list)
    risk_profile: Optional[RiskProfile] = None
    preferences: Optional[AllocationPreferences] = None
    constraints: list[AllocationConstraint] = Field(default_factory=list)
    current_positions: Optional[dict[AssetClass, float]] = None
    
    def characteristics_map(self) -> dict[AssetClass, AssetClassCharacteristics]:
        """Characteristics keyed by class; later entries win on duplicates."""
        return {c.asset_class: c for c in self.asset_characteristics}


# =========================
# Outputs
# =========================

class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    EXTREME = "EXTREME"


class TradeAction(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"  # Part of the action vocabulary; the planner only emits BUY/SELL


class AssetAllocation(FrozenModel):
    """Recommended position in one asset class."""
    asset_class: AssetClass
    allocation: float  # 0-1
    amount: float
    risk_contribution: float
    return_contribution: float
    rationale: str
    confidence: float = Field(..., ge=0, le=1)


class PortfolioMetrics(FrozenModel):
    """Portfolio-level return and risk estimates (percent scale)."""
    expected_return: float
    expected_volatility: float
    sharpe_ratio: float
    sortino_ratio: float
    max_drawdown: float
    value_at_risk_95: float
    conditional_var: float
    beta: float
    alpha: float
    information_ratio: float


class RiskAnalysis(FrozenModel):
    """Risk scoring and decomposition."""
    risk_score: float
    risk_level: RiskLevel
    systematic_risk: float
    idiosyncratic_risk: float
    tail_risk: float
    liquidity_risk: float
    concentration_risk: float
    currency_risk: float
    risk_decomposition: dict[AssetClass, float] = Field(default_factory=dict)


class DiversificationMetrics(FrozenModel):
    """Concentration and correlation structure of the allocation."""
    diversification_ratio: float
    herfindahl_index: float
    effective_number_of_assets: float
    average_correlation: float
    max_pairwise_correlation: float
    correlation_assets: list[AssetClass] = Field(default_factory=list)
    correlation_matrix: list[list[float]] = Field(default_factory=list)
    asset_class_diversity: float


class RebalancingAction(FrozenModel):
    """Trade needed to bring one class back to target."""
    asset_class: AssetClass
    current_allocation: float
    target_allocation: float
    action: TradeAction
    trade_amount: float
    priority: int  # 1=high, 2=medium, 3=low
    estimated_cost: float
    reason: str
    tax_impact: Optional[float] = None


class AllocationRecommendation(FrozenModel):
    """Complete output of one allocation call."""
    id: str
    risk_profile: RiskProfile
    market_condition: MarketCondition
    allocations: list[AssetAllocation]
    portfolio_metrics: PortfolioMetrics
    risk_analysis: RiskAnalysis
    diversification: DiversificationMetrics
    rebalancing: Optional[list[RebalancingAction]] = None
    timestamp: datetime
    next_rebalancing_date: datetime
    methodology: str
    warnings: list[str] = Field(default_factory=list)
    
    @model_validator(mode="after")
    def allocations_sorted(self) -> "AllocationRecommendation":
        weights = [a.allocation for a in self.allocations]
        if weights != sorted(weights, reverse=True):
            raise ValueError("allocations must be ordered by descending weight")
        return self
