"""
Portfolio Performance Metrics

Forward-looking return and risk estimates for a weight mapping:
- Expected return and pairwise-covariance volatility
- Sharpe and Sortino ratios
- Drawdown, parametric VaR and CVaR estimates
- Beta, alpha and information ratio
"""
import numpy as np
from typing import Mapping

from allocation_engine.core.portfolio.risk_profiles import AssetClass
from allocation_engine.schemas.allocation import (
    DEFAULT_CORRELATION,
    CharacteristicsMap,
    PortfolioMetrics,
)
from allocation_engine.utils.logger import get_logger


logger = get_logger(__name__)

ASSET_ORDER: tuple[AssetClass, ...] = tuple(AssetClass)

# Normal-distribution multipliers at 95% confidence
VAR_95_Z = 1.645
CVAR_95_Z = 2.063

DOWNSIDE_DEVIATION_RATIO = 0.7
DRAWDOWN_VOLATILITY_MULTIPLE = 1.5
TRACKING_ERROR_RATIO = 0.5
MARKET_RISK_PREMIUM = 6.0  # percentage points
ASSUMED_BETA = 1.0


def weight_vector(weights: Mapping[AssetClass, float]) -> np.ndarray:
    return np.array([weights.get(ac, 0.0) for ac in ASSET_ORDER], dtype=float)


def return_vector(characteristics: CharacteristicsMap) -> np.ndarray:
    """Expected return (%) per class, 0 where characteristics are missing."""
    return np.array([
        characteristics[ac].expected_return if ac in characteristics else 0.0
        for ac in ASSET_ORDER
    ], dtype=float)


def volatility_vector(characteristics: CharacteristicsMap) -> np.ndarray:
    """Volatility (%) per class, 0 where characteristics are missing."""
    return np.array([
        characteristics[ac].volatility if ac in characteristics else 0.0
        for ac in ASSET_ORDER
    ], dtype=float)


def correlation_matrix(characteristics: CharacteristicsMap) -> np.ndarray:
    """
    Correlation matrix in asset-class order.
    
    Row i is read from class i's own correlation table, so the matrix is
    not forced symmetric. Diagonal is 1.0; unknown pairs are 0.3.
    """
    n = len(ASSET_ORDER)
    corr = np.full((n, n), DEFAULT_CORRELATION)
    for i, asset_i in enumerate(ASSET_ORDER):
        char = characteristics.get(asset_i)
        for j, asset_j in enumerate(ASSET_ORDER):
            if i == j:
                corr[i, j] = 1.0
            elif char is not None:
                corr[i, j] = char.correlation_with(asset_j)
    return corr


def portfolio_volatility(
    weights: Mapping[AssetClass, float],
    characteristics: CharacteristicsMap,
) -> float:
    """
    Portfolio volatility (%) from pairwise covariance terms.
    
    Percent volatilities are converted to fractions for the variance
    and the result converted back.
    """
    w = weight_vector(weights)
    vol = volatility_vector(characteristics) / 100
    cov = correlation_matrix(characteristics) * np.outer(vol, vol)
    variance = float(w @ cov @ w)
    return float(np.sqrt(max(variance, 0.0)) * 100)


class PortfolioMetricsCalculator:
    """
    Portfolio metrics calculator.
    
    All outputs are on the same percent scale as the inputs; the
    risk-free rate is a fraction and is scaled by 100 where compared.
    """
    
    def __init__(self, risk_free_rate: float = 0.04):
        self.risk_free_rate = risk_free_rate
    
    def calculate(
        self,
        weights: Mapping[AssetClass, float],
        characteristics: CharacteristicsMap,
    ) -> PortfolioMetrics:
        """
        Calculate portfolio metrics for final weights.
        
        Args:
            weights: Final allocation weights
            characteristics: Per-class statistics; missing classes contribute nothing
            
        Returns:
            PortfolioMetrics
        """
        risk_free_pct = self.risk_free_rate * 100
        
        expected_return = float(weight_vector(weights) @ return_vector(characteristics))
        expected_volatility = portfolio_volatility(weights, characteristics)
        
        excess_return = expected_return - risk_free_pct
        sharpe_ratio = excess_return / expected_volatility if expected_volatility > 0 else 0.0
        
        # Volatility stands in for downside deviation
        downside_deviation = expected_volatility * DOWNSIDE_DEVIATION_RATIO
        sortino_ratio = excess_return / downside_deviation if downside_deviation > 0 else 0.0
        
        alpha = expected_return - (risk_free_pct + ASSUMED_BETA * MARKET_RISK_PREMIUM)
        tracking_error = expected_volatility * TRACKING_ERROR_RATIO
        information_ratio = alpha / tracking_error if tracking_error > 0 else 0.0
        
        logger.debug(
            f"Portfolio return={expected_return:.2f}% vol={expected_volatility:.2f}% "
            f"sharpe={sharpe_ratio:.2f}"
        )
        
        return PortfolioMetrics(
            expected_return=expected_return,
            expected_volatility=expected_volatility,
            sharpe_ratio=sharpe_ratio,
            sortino_ratio=sortino_ratio,
            max_drawdown=expected_volatility * DRAWDOWN_VOLATILITY_MULTIPLE,
            value_at_risk_95=VAR_95_Z * expected_volatility,
            conditional_var=CVAR_95_Z * expected_volatility,
            beta=ASSUMED_BETA,
            alpha=alpha,
            information_ratio=information_ratio,
        )
