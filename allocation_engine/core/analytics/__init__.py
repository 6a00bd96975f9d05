"""
Analytics Package

Portfolio-level analytics over a final allocation:
- Performance metrics
- Risk analysis
- Diversification
"""
from .performance import (
    PortfolioMetricsCalculator,
    correlation_matrix,
    portfolio_volatility,
)
from .risk_metrics import (
    RiskAnalyzer,
    classify_risk_level,
    herfindahl_index,
)
from .diversification import DiversificationAnalyzer

__all__ = [
    "PortfolioMetricsCalculator",
    "correlation_matrix",
    "portfolio_volatility",
    "RiskAnalyzer",
    "classify_risk_level",
    "herfindahl_index",
    "DiversificationAnalyzer",
]
