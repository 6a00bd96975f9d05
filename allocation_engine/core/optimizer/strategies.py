"""
Optimization Strategies for Allocation Refinement

Closed-form heuristics that tilt an allocation toward one objective:
- Maximum Sharpe ratio
- Minimum risk (inverse volatility)
- Maximum return (volatility-penalized)
- Risk parity (inverse volatility alias)
- Maximum diversification (inverse average correlation)

Each strategy builds a candidate allocation from per-class statistics
and blends it with the incoming weights rather than replacing them.
Classes without characteristics get no candidate weight.
"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import Collection, Mapping

from allocation_engine.core.portfolio.allocation import (
    AllocationWeights,
    blend_weights,
    equal_weights,
    proportional_weights,
)
from allocation_engine.core.portfolio.risk_profiles import (
    AssetClass,
    RiskProfile,
    get_default_risk_profile,
)
from allocation_engine.schemas.allocation import CharacteristicsMap
from allocation_engine.utils.exceptions import ValidationError
from allocation_engine.utils.logger import get_logger


logger = get_logger(__name__)


class OptimizationObjective(str, Enum):
    """Portfolio optimization objectives"""
    MAX_SHARPE = "MAX_SHARPE"
    MIN_RISK = "MIN_RISK"
    MAX_RETURN = "MAX_RETURN"
    RISK_PARITY = "RISK_PARITY"
    MAX_DIVERSIFICATION = "MAX_DIVERSIFICATION"


OBJECTIVE_DESCRIPTIONS: dict[OptimizationObjective, str] = {
    OptimizationObjective.MAX_SHARPE: "Sharpe ratio maximization with risk-adjusted return optimization",
    OptimizationObjective.MIN_RISK: "Minimum variance optimization prioritizing capital preservation",
    OptimizationObjective.MAX_RETURN: "Return maximization within risk tolerance constraints",
    OptimizationObjective.RISK_PARITY: "Equal risk contribution across asset classes",
    OptimizationObjective.MAX_DIVERSIFICATION: "Correlation-based diversification maximization",
}

# Keeps inverse-correlation scores finite for uncorrelated classes
CORRELATION_FLOOR = 0.1

# Return haircut for classes more volatile than the profile allows
VOLATILITY_PENALTY = 0.5


class ObjectiveStrategy(ABC):
    """
    Base class for allocation refinement strategies.
    
    Subclasses score each class; the base turns scores into a
    candidate allocation (equal weight if every score is zero) and
    blends it with the input.
    """
    
    objective: OptimizationObjective
    candidate_share: float = 0.5
    
    @abstractmethod
    def scores(
        self,
        characteristics: CharacteristicsMap,
        risk_profile: RiskProfile,
    ) -> dict[AssetClass, float]:
        """Non-negative score per class; missing classes score zero."""
    
    def optimize(
        self,
        weights: Mapping[AssetClass, float],
        characteristics: CharacteristicsMap,
        risk_profile: RiskProfile,
        excluded: Collection[AssetClass] = (),
    ) -> AllocationWeights:
        """
        Refine weights toward this strategy's objective.
        
        Args:
            weights: Constrained weights (sum to 1.0)
            characteristics: Per-class statistics, possibly incomplete
            risk_profile: Active risk profile
            excluded: Classes the investor excluded; they get no candidate weight
            
        Returns:
            Blended, renormalized weights
        """
        scores = {
            ac: score
            for ac, score in self.scores(characteristics, risk_profile).items()
            if ac not in excluded
        }
        
        candidate = proportional_weights(scores)
        if candidate is None:
            logger.debug(f"{self.objective.value}: no usable scores, candidate is equal weight")
            candidate = equal_weights(exclude=excluded)
        
        return blend_weights(weights, candidate, self.candidate_share)


def inverse_volatility_scores(characteristics: CharacteristicsMap) -> dict[AssetClass, float]:
    """1/volatility per class; classes with no positive volatility are left out."""
    scores = {}
    for asset_class in AssetClass:
        char = characteristics.get(asset_class)
        if char is not None and char.volatility > 0:
            scores[asset_class] = 1 / char.volatility
    return scores


class MaxSharpeStrategy(ObjectiveStrategy):
    """Weights proportional to each class's positive Sharpe ratio."""
    
    objective = OptimizationObjective.MAX_SHARPE
    candidate_share = 0.5
    
    def __init__(self, risk_free_rate: float = 0.04):
        self.risk_free_rate = risk_free_rate
    
    def scores(self, characteristics, risk_profile):
        risk_free_pct = self.risk_free_rate * 100
        scores = {}
        for asset_class in AssetClass:
            char = characteristics.get(asset_class)
            if char is not None and char.volatility > 0:
                sharpe = (char.expected_return - risk_free_pct) / char.volatility
                scores[asset_class] = max(0.0, sharpe)
        return scores


class MinRiskStrategy(ObjectiveStrategy):
    """Inverse-volatility weighting, leaning 60/40 toward the candidate."""
    
    objective = OptimizationObjective.MIN_RISK
    candidate_share = 0.6
    
    def scores(self, characteristics, risk_profile):
        return inverse_volatility_scores(characteristics)


class RiskParityStrategy(MinRiskStrategy):
    """
    Risk parity approximated by inverse volatility.
    
    Same weights as MinRiskStrategy. Correlations are ignored, so this
    is not an equal-risk-contribution solution.
    """
    
    objective = OptimizationObjective.RISK_PARITY


class MaxReturnStrategy(ObjectiveStrategy):
    """Weights proportional to expected return, halved above the profile's volatility ceiling."""
    
    objective = OptimizationObjective.MAX_RETURN
    candidate_share = 0.5
    
    def scores(self, characteristics, risk_profile):
        max_volatility = get_default_risk_profile(risk_profile).max_volatility
        scores = {}
        for asset_class in AssetClass:
            char = characteristics.get(asset_class)
            if char is not None:
                penalty = VOLATILITY_PENALTY if char.volatility > max_volatility else 1.0
                scores[asset_class] = max(0.0, char.expected_return * penalty)
        return scores


class MaxDiversificationStrategy(ObjectiveStrategy):
    """Weights inversely proportional to average absolute correlation with the other classes."""
    
    objective = OptimizationObjective.MAX_DIVERSIFICATION
    candidate_share = 0.5
    
    def scores(self, characteristics, risk_profile):
        scores = {}
        for asset_class in AssetClass:
            char = characteristics.get(asset_class)
            if char is None:
                continue
            others = [ac for ac in AssetClass if ac != asset_class]
            avg_corr = sum(abs(char.correlation_with(ac)) for ac in others) / len(others)
            scores[asset_class] = 1 / (CORRELATION_FLOOR + avg_corr)
        return scores


STRATEGIES: dict[OptimizationObjective, type[ObjectiveStrategy]] = {
    OptimizationObjective.MAX_SHARPE: MaxSharpeStrategy,
    OptimizationObjective.MIN_RISK: MinRiskStrategy,
    OptimizationObjective.MAX_RETURN: MaxReturnStrategy,
    OptimizationObjective.RISK_PARITY: RiskParityStrategy,
    OptimizationObjective.MAX_DIVERSIFICATION: MaxDiversificationStrategy,
}


def parse_objective(objective: OptimizationObjective | str) -> OptimizationObjective:
    """
    Raises:
        ValidationError: If the objective is not supported
    """
    try:
        return OptimizationObjective(objective.upper() if isinstance(objective, str) else objective)
    except ValueError:
        raise ValidationError(
            f"Unsupported objective: {objective}. "
            f"Valid objectives: {[o.value for o in OptimizationObjective]}",
            details={"objective": str(objective)},
        ) from None


def get_strategy(
    objective: OptimizationObjective | str,
    risk_free_rate: float = 0.04,
) -> ObjectiveStrategy:
    """
    Build the strategy for an objective.
    
    Args:
        objective: OptimizationObjective member or its name
        risk_free_rate: Annual risk-free rate as a fraction (used by MAX_SHARPE)
        
    Raises:
        ValidationError: If the objective is not supported
    """
    objective = parse_objective(objective)
    
    if objective == OptimizationObjective.MAX_SHARPE:
        return MaxSharpeStrategy(risk_free_rate)
    return STRATEGIES[objective]()
