"""
Allocation Weight Helpers

Small pure functions over asset-class weight mappings shared by the
regime adjustment, constraint projection and optimizer stages.
Every helper returns a new mapping keyed by all asset classes.
"""
from typing import Collection, Mapping, Optional

from allocation_engine.core.portfolio.risk_profiles import AssetClass
from allocation_engine.utils.logger import get_logger


logger = get_logger(__name__)

AllocationWeights = dict[AssetClass, float]

# Tolerated drift of a normalized weight sum from 1.0
WEIGHT_SUM_TOLERANCE = 1e-6


def equal_weights(exclude: Collection[AssetClass] = ()) -> AllocationWeights:
    """
    Equal weight across every asset class not in ``exclude``.
    
    Excluding every class is treated as excluding none.
    """
    eligible = [ac for ac in AssetClass if ac not in exclude] or list(AssetClass)
    return {ac: (1.0 / len(eligible) if ac in eligible else 0.0) for ac in AssetClass}


def normalize_weights(weights: Mapping[AssetClass, float]) -> AllocationWeights:
    """
    Scale weights so they sum to 1.0.
    
    Falls back to equal weight when the total is exactly zero, which
    happens when every class has been excluded or scaled away.
    """
    full = {ac: weights.get(ac, 0.0) for ac in AssetClass}
    total = sum(full.values())
    
    if total == 0:
        logger.warning("All allocation weights are zero, falling back to equal weight")
        return equal_weights()
    
    return {ac: w / total for ac, w in full.items()}


def blend_weights(
    original: Mapping[AssetClass, float],
    candidate: Mapping[AssetClass, float],
    candidate_weight: float = 0.5,
) -> AllocationWeights:
    """
    Mix a candidate allocation into an existing one and renormalize.
    
    Args:
        original: Weights the stage received
        candidate: Weights the stage proposes
        candidate_weight: Share of the result taken from the candidate (0-1)
    """
    blended = {
        ac: (1 - candidate_weight) * original.get(ac, 0.0)
        + candidate_weight * candidate.get(ac, 0.0)
        for ac in AssetClass
    }
    return normalize_weights(blended)


def proportional_weights(
    scores: Mapping[AssetClass, float],
) -> Optional[AllocationWeights]:
    """
    Turn non-negative per-class scores into weights.
    
    Classes absent from ``scores`` get zero weight. Returns None when
    the scores sum to zero so callers can choose their own fallback.
    """
    total = sum(scores.values())
    if total <= 0:
        return None
    return {ac: scores.get(ac, 0.0) / total for ac in AssetClass}


def scale_weights(
    weights: Mapping[AssetClass, float],
    factors: Mapping[AssetClass, float],
) -> AllocationWeights:
    """Multiply selected classes by a factor; unlisted classes keep scale 1.0."""
    return {ac: weights.get(ac, 0.0) * factors.get(ac, 1.0) for ac in AssetClass}


def weights_sum_to_one(weights: Mapping[AssetClass, float]) -> bool:
    return abs(sum(weights.values()) - 1.0) <= WEIGHT_SUM_TOLERANCE
