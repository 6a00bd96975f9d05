"""
Portfolio Constraints

Projects an allocation onto the investor's exclusions, preferred
classes, per-class bounds and explicit constraints.

Bounds are applied before the final renormalization and are not
re-checked afterwards, so a clamped class can land slightly outside
its bound once the remaining mass is redistributed.
"""
from typing import Mapping, Optional, Sequence

from allocation_engine.core.portfolio.allocation import AllocationWeights, normalize_weights
from allocation_engine.core.portfolio.risk_profiles import AssetClass
from allocation_engine.schemas.allocation import (
    AllocationConstraint,
    AllocationPreferences,
    ConstraintType,
)
from allocation_engine.utils.logger import get_logger


logger = get_logger(__name__)


class ConstraintProjector:
    """
    Applies preferences and constraints in a fixed order.
    
    Usage:
        projector = ConstraintProjector(preferences, constraints)
        weights = projector.apply(weights)
    """
    
    def __init__(
        self,
        preferences: Optional[AllocationPreferences] = None,
        constraints: Optional[Sequence[AllocationConstraint]] = None,
    ):
        self.preferences = preferences
        self.constraints = list(constraints or [])
    
    def apply(self, weights: Mapping[AssetClass, float]) -> AllocationWeights:
        constrained = {ac: weights.get(ac, 0.0) for ac in AssetClass}
        
        if self.preferences is not None:
            constrained = self._apply_exclusions(constrained)
            constrained = self._apply_preferred(constrained)
            constrained = self._apply_bounds(constrained)
        
        constrained = self._apply_constraints(constrained)
        
        return normalize_weights(constrained)
    
    def _apply_exclusions(self, weights: AllocationWeights) -> AllocationWeights:
        for asset_class in self.preferences.excluded_asset_classes:
            weights[asset_class] = 0.0
        return weights
    
    def _apply_preferred(self, weights: AllocationWeights) -> AllocationWeights:
        preferred = self.preferences.preferred_asset_classes
        if not preferred:
            return weights
        return {ac: (w if ac in preferred else 0.0) for ac, w in weights.items()}
    
    def _apply_bounds(self, weights: AllocationWeights) -> AllocationWeights:
        min_weight = self.preferences.min_allocation_per_class
        max_weight = self.preferences.max_allocation_per_class
        
        if min_weight is not None:
            weights = {
                ac: (min_weight if 0 < w < min_weight else w)
                for ac, w in weights.items()
            }
        
        if max_weight is not None:
            weights = {ac: min(w, max_weight) for ac, w in weights.items()}
        
        return weights
    
    def _apply_constraints(self, weights: AllocationWeights) -> AllocationWeights:
        for constraint in self.constraints:
            if constraint.asset_class is None:
                continue
            
            current = weights.get(constraint.asset_class, 0.0)
            
            if constraint.type == ConstraintType.MIN_ALLOCATION:
                if current < constraint.value and constraint.hard:
                    weights[constraint.asset_class] = constraint.value
            elif constraint.type == ConstraintType.MAX_ALLOCATION:
                if current > constraint.value:
                    weights[constraint.asset_class] = constraint.value
            else:
                logger.debug(
                    f"Constraint {constraint.type.value} on {constraint.asset_class.value} "
                    "does not act on weights, skipping"
                )
        
        return weights


def apply_constraints(
    weights: Mapping[AssetClass, float],
    preferences: Optional[AllocationPreferences] = None,
    constraints: Optional[Sequence[AllocationConstraint]] = None,
) -> AllocationWeights:
    """Convenience wrapper around ConstraintProjector."""
    return ConstraintProjector(preferences, constraints).apply(weights)
