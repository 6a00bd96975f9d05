"""
Risk Analysis

Scores allocation risk against the active profile's volatility ceiling
and breaks it down by source:
- Systematic vs idiosyncratic split
- Tail, liquidity, concentration and currency risk
- Per-class risk decomposition
"""
from typing import Mapping

from allocation_engine.core.portfolio.risk_profiles import (
    AssetClass,
    RiskProfile,
    get_default_risk_profile,
)
from allocation_engine.schemas.allocation import (
    CharacteristicsMap,
    RiskAnalysis,
    RiskLevel,
)


SYSTEMATIC_SHARE = 0.7
TAIL_RISK_MULTIPLE = 1.2
CURRENCY_EXPOSURE_WEIGHT = 50


def herfindahl_index(weights: Mapping[AssetClass, float]) -> float:
    """Sum of squared weights."""
    return sum(w * w for w in weights.values())


def classify_risk_level(risk_score: float) -> RiskLevel:
    if risk_score < 40:
        return RiskLevel.LOW
    if risk_score < 60:
        return RiskLevel.MEDIUM
    if risk_score < 80:
        return RiskLevel.HIGH
    return RiskLevel.EXTREME


class RiskAnalyzer:
    """
    Risk analyzer for a final allocation.
    
    Uses the weighted average of class volatilities as its volatility
    measure, not the covariance-based figure in PortfolioMetrics.
    """
    
    def analyze(
        self,
        weights: Mapping[AssetClass, float],
        characteristics: CharacteristicsMap,
        risk_profile: RiskProfile,
    ) -> RiskAnalysis:
        profile = get_default_risk_profile(risk_profile)
        
        contributions: dict[AssetClass, float] = {}
        liquidity_risk = 0.0
        for asset_class, weight in weights.items():
            char = characteristics.get(asset_class)
            if char is None:
                continue
            contributions[asset_class] = weight * char.volatility
            liquidity_risk += weight * (100 - char.liquidity_score)
        
        total_volatility = sum(contributions.values())
        risk_score = min(100.0, total_volatility / profile.max_volatility * 100)
        
        currency_weight = weights.get(AssetClass.FOREX, 0.0) + weights.get(AssetClass.CRYPTO, 0.0)
        
        return RiskAnalysis(
            risk_score=risk_score,
            risk_level=classify_risk_level(risk_score),
            systematic_risk=total_volatility * SYSTEMATIC_SHARE,
            idiosyncratic_risk=total_volatility * (1 - SYSTEMATIC_SHARE),
            tail_risk=total_volatility * TAIL_RISK_MULTIPLE,
            liquidity_risk=liquidity_risk,
            concentration_risk=herfindahl_index(weights) * 100,
            currency_risk=currency_weight * CURRENCY_EXPOSURE_WEIGHT,
            risk_decomposition=self._decompose(contributions, total_volatility),
        )
    
    def _decompose(
        self,
        contributions: Mapping[AssetClass, float],
        total: float,
    ) -> dict[AssetClass, float]:
        """Percent of total risk per class with a nonzero contribution."""
        if total <= 0:
            return {}
        return {
            ac: contrib / total * 100
            for ac, contrib in contributions.items()
            if contrib > 0
        }
