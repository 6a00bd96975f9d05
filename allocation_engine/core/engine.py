"""
Asset Allocation Engine - Main Service

Runs the complete allocation pipeline for one request:
1. Risk profile resolution
2. Market regime classification
3. Base allocation lookup
4. Regime adjustment
5. Constraint projection
6. Objective optimization
7. Portfolio metrics, risk and diversification analysis
8. Rebalancing plan (when current positions are supplied)
9. Recommendation assembly

The engine holds only read-only configuration; each call works on its
own inputs, so one instance can serve concurrent callers.
"""
from dataclasses import dataclass
from typing import Optional

from allocation_engine.config import Settings, settings as default_settings
from allocation_engine.core.analytics import (
    DiversificationAnalyzer,
    PortfolioMetricsCalculator,
    RiskAnalyzer,
)
from allocation_engine.core.market.regime import (
    adjust_for_market_conditions,
    classify_market_condition,
)
from allocation_engine.core.optimizer.strategies import (
    OptimizationObjective,
    get_strategy,
    parse_objective,
)
from allocation_engine.core.portfolio.constraints import ConstraintProjector
from allocation_engine.core.portfolio.rebalancing import RebalancingPlanner
from allocation_engine.core.portfolio.risk_profiles import (
    AssetClass,
    DefaultRiskProfile,
    RiskProfile,
    get_base_allocations,
    get_default_risk_profile,
    resolve_risk_profile,
)
from allocation_engine.core.recommendation import RecommendationAssembler
from allocation_engine.schemas.allocation import AllocationInput, AllocationRecommendation
from allocation_engine.utils.exceptions import ValidationError
from allocation_engine.utils.logger import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class EngineConfig:
    """Read-only engine configuration, fixed at construction."""
    objective: OptimizationObjective = OptimizationObjective.MAX_SHARPE
    risk_free_rate: float = 0.04          # Annual, as a fraction
    rebalancing_threshold: float = 0.05   # Drift fraction
    time_horizon_years: int = 5
    allow_leverage: bool = False
    max_leverage: float = 1.0
    transaction_cost_model: str = "PERCENTAGE"
    transaction_cost_rate: float = 0.001
    include_alternatives: bool = True
    default_rebalancing_days: int = 90
    
    def __post_init__(self):
        object.__setattr__(self, "objective", parse_objective(self.objective))
        
        if not 0 <= self.rebalancing_threshold <= 1:
            raise ValidationError(
                f"Rebalancing threshold must be a fraction between 0 and 1, got {self.rebalancing_threshold}",
                details={"rebalancing_threshold": self.rebalancing_threshold},
            )
        if self.default_rebalancing_days <= 0:
            raise ValidationError(
                "Default rebalancing interval must be positive",
                details={"default_rebalancing_days": self.default_rebalancing_days},
            )
    
    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "EngineConfig":
        """Build configuration from environment-backed settings."""
        settings = settings or default_settings
        return cls(
            objective=settings.ALLOCATION_OBJECTIVE,
            risk_free_rate=settings.RISK_FREE_RATE,
            rebalancing_threshold=settings.REBALANCING_THRESHOLD,
            time_horizon_years=settings.TIME_HORIZON_YEARS,
            allow_leverage=settings.ALLOW_LEVERAGE,
            max_leverage=settings.MAX_LEVERAGE,
            transaction_cost_model=settings.TRANSACTION_COST_MODEL,
            transaction_cost_rate=settings.TRANSACTION_COST_RATE,
            include_alternatives=settings.INCLUDE_ALTERNATIVES,
            default_rebalancing_days=settings.DEFAULT_REBALANCING_DAYS,
        )


class AssetAllocationEngine:
    """
    Asset allocation engine.
    
    Usage:
        engine = AssetAllocationEngine(EngineConfig(objective="MIN_RISK"))
        recommendation = await engine.generate_allocation(allocation_input)
        
        for allocation in recommendation.allocations:
            print(f"{allocation.asset_class.value}: {allocation.allocation:.1%}")
    """
    
    def __init__(self, config: Optional[EngineConfig] = None):
        """
        Initialize the allocation engine.
        
        Args:
            config: Engine configuration (defaults to environment settings)
        """
        self.config = config or EngineConfig.from_settings()
        
        # Initialize components
        self.strategy = get_strategy(self.config.objective, self.config.risk_free_rate)
        self.metrics_calculator = PortfolioMetricsCalculator(self.config.risk_free_rate)
        self.risk_analyzer = RiskAnalyzer()
        self.diversification_analyzer = DiversificationAnalyzer()
        self.rebalancing_planner = RebalancingPlanner(
            drift_threshold=self.config.rebalancing_threshold,
            transaction_cost_rate=self.config.transaction_cost_rate,
        )
        self.assembler = RecommendationAssembler(
            objective=self.config.objective,
            default_rebalancing_days=self.config.default_rebalancing_days,
        )
    
    def get_default_risk_profile(self, profile: RiskProfile | str) -> DefaultRiskProfile:
        """Read-only lookup of a profile's base weights and risk ceilings."""
        return get_default_risk_profile(profile)
    
    async def generate_allocation(self, allocation_input: AllocationInput) -> AllocationRecommendation:
        """
        Generate an allocation recommendation.
        
        Declared async for callers that await their services; the work is
        pure computation and never suspends.
        
        Args:
            allocation_input: Account, market and preference data for this call
            
        Returns:
            AllocationRecommendation
            
        Raises:
            ValidationError: If the input cannot be allocated
            ConfigurationError: If a static table is missing an entry
        """
        self._validate(allocation_input)
        
        characteristics = allocation_input.characteristics_map()
        missing = [ac.value for ac in AssetClass if ac not in characteristics]
        if missing:
            logger.warning(f"No characteristics for {missing}; they contribute nothing to weighted metrics")
        
        risk_profile = resolve_risk_profile(
            allocation_input.account_size,
            allocation_input.risk_profile,
            allocation_input.preferences,
        )
        market_condition = classify_market_condition(allocation_input.market_metrics)
        
        logger.info(
            f"Generating allocation: profile={risk_profile.value} "
            f"market={market_condition.value} objective={self.config.objective.value}"
        )
        
        weights = get_base_allocations(risk_profile)
        logger.debug(f"Base weights: {self._fmt(weights)}")
        
        weights = adjust_for_market_conditions(weights, market_condition, allocation_input.market_metrics)
        logger.debug(f"Regime-adjusted weights: {self._fmt(weights)}")
        
        weights = ConstraintProjector(
            allocation_input.preferences,
            allocation_input.constraints,
        ).apply(weights)
        logger.debug(f"Constrained weights: {self._fmt(weights)}")
        
        excluded = allocation_input.preferences.excluded_asset_classes if allocation_input.preferences else []
        weights = self.strategy.optimize(weights, characteristics, risk_profile, excluded)
        logger.debug(f"Optimized weights: {self._fmt(weights)}")
        
        portfolio_metrics = self.metrics_calculator.calculate(weights, characteristics)
        risk_analysis = self.risk_analyzer.analyze(weights, characteristics, risk_profile)
        diversification = self.diversification_analyzer.analyze(weights, characteristics)
        
        rebalancing = None
        if allocation_input.current_positions is not None:
            rebalancing = self.rebalancing_planner.plan(
                allocation_input.current_positions,
                weights,
                allocation_input.account_size,
            )
        
        recommendation = self.assembler.assemble(
            weights,
            allocation_input,
            risk_profile,
            market_condition,
            portfolio_metrics,
            risk_analysis,
            diversification,
            rebalancing,
        )
        
        logger.info(
            f"Allocation {recommendation.id} complete: "
            f"return={portfolio_metrics.expected_return:.2f}% "
            f"vol={portfolio_metrics.expected_volatility:.2f}% "
            f"risk={risk_analysis.risk_level.value} warnings={len(recommendation.warnings)}"
        )
        
        return recommendation
    
    def _validate(self, allocation_input: AllocationInput) -> None:
        if allocation_input.account_size <= 0:
            raise ValidationError(
                f"Account size must be positive, got {allocation_input.account_size}",
                details={"account_size": allocation_input.account_size},
            )
        
        preferences = allocation_input.preferences
        if (
            preferences is not None
            and preferences.min_allocation_per_class is not None
            and preferences.max_allocation_per_class is not None
            and preferences.min_allocation_per_class > preferences.max_allocation_per_class
        ):
            raise ValidationError(
                "Minimum allocation per class exceeds maximum allocation per class",
                details={
                    "min_allocation_per_class": preferences.min_allocation_per_class,
                    "max_allocation_per_class": preferences.max_allocation_per_class,
                },
            )
        
        if allocation_input.current_positions is not None:
            negative = [ac.value for ac, amount in allocation_input.current_positions.items() if amount < 0]
            if negative:
                raise ValidationError(
                    f"Current positions cannot be negative: {negative}",
                    details={"asset_classes": negative},
                )
    
    @staticmethod
    def _fmt(weights) -> str:
        return ", ".join(f"{ac.value}={w:.4f}" for ac, w in weights.items())


async def generate_optimal_allocation(
    allocation_input: AllocationInput,
    config: Optional[EngineConfig] = None,
) -> AllocationRecommendation:
    """Generate an allocation with a one-off engine."""
    engine = AssetAllocationEngine(config)
    return await engine.generate_allocation(allocation_input)
