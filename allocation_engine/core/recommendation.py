"""
Allocation Recommendation Assembler

Turns final weights and analytics into an AllocationRecommendation:
- Per-class allocations with amounts, contributions and rationale
- Warnings from fixed risk thresholds
- Methodology text, identifier and next rebalancing date
"""
import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Mapping, Optional

from allocation_engine.core.optimizer.strategies import (
    OBJECTIVE_DESCRIPTIONS,
    OptimizationObjective,
)
from allocation_engine.core.portfolio.risk_profiles import AssetClass, RiskProfile
from allocation_engine.schemas.allocation import (
    AllocationInput,
    AllocationPreferences,
    AllocationRecommendation,
    AssetAllocation,
    AssetClassCharacteristics,
    CharacteristicsMap,
    DiversificationMetrics,
    MarketCondition,
    PortfolioMetrics,
    RebalancingAction,
    RiskAnalysis,
    RiskLevel,
)


# Allocations at or below this weight are left out of the recommendation
MIN_REPORTED_WEIGHT = 0.001

MAX_CONFIDENCE = 0.95
BASE_CONFIDENCE = 0.7
MISSING_DATA_CONFIDENCE = 0.5

# Warning thresholds
CONCENTRATION_WARNING = 40
LIQUIDITY_WARNING = 30
SMALL_ACCOUNT_SIZE = 5000
ELEVATED_VOLATILITY_INDEX = 25
MAX_CRYPTO_WEIGHT = 0.15
MAX_OPTIONS_WEIGHT = 0.25


def generate_recommendation_id() -> str:
    """Unique id of the form alloc_<epoch ms>_<random>."""
    return f"alloc_{int(time.time() * 1000)}_{uuid.uuid4().hex[:7]}"


class RecommendationAssembler:
    """
    Packages pipeline results into the final recommendation.
    
    Stateless apart from the objective and default rebalancing interval
    it was configured with.
    """
    
    def __init__(
        self,
        objective: OptimizationObjective = OptimizationObjective.MAX_SHARPE,
        default_rebalancing_days: int = 90,
    ):
        self.objective = objective
        self.default_rebalancing_days = default_rebalancing_days
    
    def assemble(
        self,
        weights: Mapping[AssetClass, float],
        allocation_input: AllocationInput,
        risk_profile: RiskProfile,
        market_condition: MarketCondition,
        portfolio_metrics: PortfolioMetrics,
        risk_analysis: RiskAnalysis,
        diversification: DiversificationMetrics,
        rebalancing: Optional[list[RebalancingAction]] = None,
    ) -> AllocationRecommendation:
        now = datetime.now(timezone.utc)
        preferences = allocation_input.preferences
        
        return AllocationRecommendation(
            id=generate_recommendation_id(),
            risk_profile=risk_profile,
            market_condition=market_condition,
            allocations=self.build_allocations(
                weights,
                allocation_input.account_size,
                allocation_input.characteristics_map(),
                portfolio_metrics,
                risk_profile,
            ),
            portfolio_metrics=portfolio_metrics,
            risk_analysis=risk_analysis,
            diversification=diversification,
            rebalancing=rebalancing,
            timestamp=now,
            next_rebalancing_date=self.next_rebalancing_date(
                preferences.rebalancing_frequency if preferences else None,
                now,
            ),
            methodology=self.methodology(risk_profile, preferences),
            warnings=self.generate_warnings(weights, risk_analysis, allocation_input),
        )
    
    def build_allocations(
        self,
        weights: Mapping[AssetClass, float],
        account_size: float,
        characteristics: CharacteristicsMap,
        portfolio_metrics: PortfolioMetrics,
        risk_profile: RiskProfile,
    ) -> list[AssetAllocation]:
        """Build allocation records from weights, largest first."""
        portfolio_vol = portfolio_metrics.expected_volatility
        allocations = []
        
        for asset_class, weight in weights.items():
            if weight <= MIN_REPORTED_WEIGHT:
                continue
            
            char = characteristics.get(asset_class)
            asset_vol = char.volatility if char else 0.0
            asset_return = char.expected_return if char else 0.0
            
            allocations.append(AssetAllocation(
                asset_class=asset_class,
                allocation=weight,
                amount=account_size * weight,
                risk_contribution=weight * asset_vol / portfolio_vol if portfolio_vol > 0 else 0.0,
                return_contribution=weight * asset_return,
                rationale=self.generate_rationale(asset_class, weight, char, risk_profile),
                confidence=self.confidence(char),
            ))
        
        # Sort by weight descending
        allocations.sort(key=lambda a: a.allocation, reverse=True)
        
        return allocations
    
    def generate_rationale(
        self,
        asset_class: AssetClass,
        weight: float,
        char: Optional[AssetClassCharacteristics],
        risk_profile: RiskProfile,
    ) -> str:
        """Generate rationale for individual allocation"""
        if char is None:
            return f"{weight * 100:.1f}% allocated to {asset_class.value}"
        
        if weight > 0.3:
            reasons = ["Core holding"]
        elif weight > 0.15:
            reasons = ["Significant position"]
        elif weight > 0.05:
            reasons = ["Moderate allocation"]
        else:
            reasons = ["Tactical allocation"]
        
        if char.sharpe_ratio > 1.5:
            reasons.append("strong risk-adjusted returns")
        
        if char.volatility < 15:
            reasons.append("low volatility")
        elif char.volatility > 25:
            reasons.append("high growth potential")
        
        if char.liquidity_score > 80:
            reasons.append("high liquidity")
        
        if risk_profile == RiskProfile.CONSERVATIVE and asset_class == AssetClass.ETF:
            reasons.append("diversification and stability")
        elif risk_profile == RiskProfile.AGGRESSIVE and asset_class == AssetClass.OPTIONS:
            reasons.append("leveraged growth opportunities")
        
        return f"{weight * 100:.1f}% allocation - {', '.join(reasons)}"
    
    def confidence(self, char: Optional[AssetClassCharacteristics]) -> float:
        """More liquid classes get more confidence; missing data gets a flat 0.5."""
        if char is None:
            return MISSING_DATA_CONFIDENCE
        return min(MAX_CONFIDENCE, BASE_CONFIDENCE + char.liquidity_score / 200)
    
    def next_rebalancing_date(
        self,
        frequency_days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> datetime:
        now = now or datetime.now(timezone.utc)
        return now + timedelta(days=frequency_days or self.default_rebalancing_days)
    
    def methodology(
        self,
        risk_profile: RiskProfile,
        preferences: Optional[AllocationPreferences] = None,
    ) -> str:
        text = f"{OBJECTIVE_DESCRIPTIONS[self.objective]} tailored for {risk_profile.value} risk profile"
        if preferences is not None:
            if preferences.esg_focused:
                text += "; ESG focus requested"
            if preferences.tax_optimized:
                text += "; tax optimization requested"
        return text
    
    def generate_warnings(
        self,
        weights: Mapping[AssetClass, float],
        risk_analysis: RiskAnalysis,
        allocation_input: AllocationInput,
    ) -> list[str]:
        """Generate warnings and caveats"""
        warnings = []
        
        if risk_analysis.risk_level in (RiskLevel.HIGH, RiskLevel.EXTREME):
            warnings.append(
                f"Portfolio risk level is {risk_analysis.risk_level.value}. "
                "Consider reducing exposure to volatile assets."
            )
        
        if risk_analysis.concentration_risk > CONCENTRATION_WARNING:
            warnings.append(
                "High concentration detected. Portfolio may benefit from additional diversification."
            )
        
        if risk_analysis.liquidity_risk > LIQUIDITY_WARNING:
            warnings.append(
                "Some positions may have limited liquidity. Consider exit strategies in advance."
            )
        
        if allocation_input.account_size < SMALL_ACCOUNT_SIZE:
            warnings.append(
                "Small account size may limit diversification. "
                "Consider focusing on ETFs for broader exposure."
            )
        
        if allocation_input.market_metrics.volatility_index > ELEVATED_VOLATILITY_INDEX:
            warnings.append(
                "Market volatility is elevated. Consider maintaining higher cash reserves."
            )
        
        if weights.get(AssetClass.CRYPTO, 0.0) > MAX_CRYPTO_WEIGHT:
            warnings.append(
                "Cryptocurrency allocation exceeds 15%. "
                "Be aware of high volatility and regulatory risks."
            )
        
        if weights.get(AssetClass.OPTIONS, 0.0) > MAX_OPTIONS_WEIGHT:
            warnings.append(
                "Options allocation is significant. Ensure adequate knowledge and risk management."
            )
        
        return warnings
