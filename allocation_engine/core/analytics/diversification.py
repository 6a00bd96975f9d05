"""
Diversification Metrics

Concentration (HHI, effective number of assets), correlation structure
and diversification ratio of an allocation.
"""
import numpy as np
from typing import Mapping

from allocation_engine.core.analytics.performance import (
    ASSET_ORDER,
    correlation_matrix,
    portfolio_volatility,
    volatility_vector,
    weight_vector,
)
from allocation_engine.core.analytics.risk_metrics import herfindahl_index
from allocation_engine.core.portfolio.risk_profiles import AssetClass
from allocation_engine.schemas.allocation import (
    CharacteristicsMap,
    DiversificationMetrics,
)


# Weight above which a class counts as held
MEANINGFUL_WEIGHT = 0.01


class DiversificationAnalyzer:
    """Diversification analysis for a final allocation."""
    
    def analyze(
        self,
        weights: Mapping[AssetClass, float],
        characteristics: CharacteristicsMap,
    ) -> DiversificationMetrics:
        hhi = herfindahl_index(weights)
        effective_n = 1 / hhi if hhi > 0 else float(len(weights))
        
        average_corr, max_corr = self._pairwise_correlation(characteristics)
        
        weighted_avg_vol = float(weight_vector(weights) @ volatility_vector(characteristics))
        port_vol = portfolio_volatility(weights, characteristics)
        diversification_ratio = weighted_avg_vol / port_vol if port_vol > 0 else 1.0
        
        held = sum(1 for w in weights.values() if w > MEANINGFUL_WEIGHT)
        diversity = held / len(AssetClass) * 100
        
        return DiversificationMetrics(
            diversification_ratio=diversification_ratio,
            herfindahl_index=hhi,
            effective_number_of_assets=effective_n,
            average_correlation=average_corr,
            max_pairwise_correlation=max_corr,
            correlation_assets=list(ASSET_ORDER),
            correlation_matrix=correlation_matrix(characteristics).tolist(),
            asset_class_diversity=diversity,
        )
    
    def _pairwise_correlation(
        self,
        characteristics: CharacteristicsMap,
    ) -> tuple[float, float]:
        """
        Mean and max absolute correlation over unordered pairs.
        
        A pair counts when its first class has characteristics; unknown
        correlations within such a pair default to 0.3.
        """
        correlations = []
        for i, asset_i in enumerate(ASSET_ORDER):
            char = characteristics.get(asset_i)
            if char is None:
                continue
            for asset_j in ASSET_ORDER[i + 1:]:
                correlations.append(abs(char.correlation_with(asset_j)))
        
        if not correlations:
            return 0.0, 0.0
        return float(np.mean(correlations)), float(max(correlations))
