"""
Portfolio Rebalancing

Compares current holdings against target weights and emits the
trades needed to close drift above the configured threshold.
"""
from typing import Mapping

from allocation_engine.core.portfolio.risk_profiles import AssetClass
from allocation_engine.schemas.allocation import RebalancingAction, TradeAction
from allocation_engine.utils.logger import get_logger


logger = get_logger(__name__)

# Drift levels (fractions) for trade urgency
HIGH_PRIORITY_DRIFT = 0.15
MEDIUM_PRIORITY_DRIFT = 0.10


def drift_priority(drift: float) -> int:
    """1=high, 2=medium, 3=low."""
    if drift > HIGH_PRIORITY_DRIFT:
        return 1
    if drift > MEDIUM_PRIORITY_DRIFT:
        return 2
    return 3


class RebalancingPlanner:
    """
    Generates rebalancing trades between current and target allocations.
    
    Usage:
        planner = RebalancingPlanner(drift_threshold=0.05)
        actions = planner.plan(current_positions, target_weights, account_size)
        for action in actions:
            print(f"{action.action.value} {action.asset_class.value}: ${action.trade_amount:.2f}")
    """
    
    def __init__(
        self,
        drift_threshold: float = 0.05,
        transaction_cost_rate: float = 0.001,
    ):
        """
        Args:
            drift_threshold: Minimum |current - target| weight (fraction) to trade
            transaction_cost_rate: Estimated cost per unit of traded amount
        """
        self.drift_threshold = drift_threshold
        self.transaction_cost_rate = transaction_cost_rate
    
    def plan(
        self,
        current_positions: Mapping[AssetClass, float],
        target_weights: Mapping[AssetClass, float],
        account_size: float,
    ) -> list[RebalancingAction]:
        """
        Args:
            current_positions: Current value held per asset class
            target_weights: Target weights (sum to 1.0)
            account_size: Capital the target weights apply to
            
        Returns:
            Actions sorted by priority, highest first
        """
        current_total = sum(current_positions.values())
        actions = []
        
        for asset_class, target_weight in target_weights.items():
            current_amount = current_positions.get(asset_class, 0.0)
            current_weight = current_amount / current_total if current_total > 0 else 0.0
            target_amount = account_size * target_weight
            
            drift = abs(current_weight - target_weight)
            if drift <= self.drift_threshold:
                continue
            
            trade_delta = target_amount - current_amount
            trade_amount = abs(trade_delta)
            
            actions.append(RebalancingAction(
                asset_class=asset_class,
                current_allocation=current_weight,
                target_allocation=target_weight,
                action=TradeAction.BUY if trade_delta > 0 else TradeAction.SELL,
                trade_amount=trade_amount,
                priority=drift_priority(drift),
                estimated_cost=trade_amount * self.transaction_cost_rate,
                reason=f"Drift of {drift * 100:.2f}% exceeds threshold",
            ))
        
        # Stable sort keeps asset-class order within a priority
        actions.sort(key=lambda a: a.priority)
        
        logger.debug(f"Planned {len(actions)} rebalancing actions")
        return actions
