"""
Asset Allocation Engine - Test Configuration
Shared fixtures and test configuration.
"""
import os
import sys
import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set test environment
os.environ["APP_ENV"] = "testing"
os.environ["LOG_TO_FILE"] = "false"

from allocation_engine import AssetAllocationEngine, EngineConfig  # noqa: E402
from allocation_engine.core.portfolio.risk_profiles import AssetClass  # noqa: E402
from allocation_engine.schemas.allocation import (  # noqa: E402
    AllocationInput,
    AssetClassCharacteristics,
    MarketMetrics,
)


# =========================
# Market Fixtures
# =========================

def make_market_metrics(**overrides) -> MarketMetrics:
    """Neutral mid-volatility snapshot (classifies as SIDEWAYS)."""
    data = {
        "volatility_index": 18,
        "trend_direction": "NEUTRAL",
        "market_strength": 50,
        "sentiment_score": 50,
        "interest_rate_level": "MEDIUM",
        "inflation_rate": 2.5,
        "credit_spread": 150,
        "economic_phase": "EXPANSION",
    }
    data.update(overrides)
    return MarketMetrics(**data)


@pytest.fixture
def market_metrics() -> MarketMetrics:
    """Neutral market snapshot."""
    return make_market_metrics()


@pytest.fixture
def market_metrics_factory():
    """Build market snapshots with selected fields overridden."""
    return make_market_metrics


# =========================
# Asset Characteristics Fixtures
# =========================

def make_asset_characteristics() -> list[AssetClassCharacteristics]:
    """Statistics for all six asset classes."""
    return [
        AssetClassCharacteristics(
            asset_class=AssetClass.EQUITIES,
            volatility=18,
            expected_return=10,
            sharpe_ratio=0.55,
            max_drawdown=35,
            liquidity_score=95,
            correlations={
                AssetClass.OPTIONS: 0.65,
                AssetClass.FUTURES: 0.5,
                AssetClass.ETF: 0.85,
                AssetClass.FOREX: 0.2,
                AssetClass.CRYPTO: 0.3,
            },
            market_size=50e12,
            transaction_cost=0.001,
            minimum_investment=1,
        ),
        AssetClassCharacteristics(
            asset_class=AssetClass.OPTIONS,
            volatility=30,
            expected_return=15,
            sharpe_ratio=0.5,
            max_drawdown=50,
            liquidity_score=70,
            correlations={
                AssetClass.EQUITIES: 0.65,
                AssetClass.FUTURES: 0.4,
                AssetClass.ETF: 0.55,
                AssetClass.FOREX: 0.1,
                AssetClass.CRYPTO: 0.2,
            },
            market_size=10e12,
            transaction_cost=0.005,
            minimum_investment=100,
        ),
        AssetClassCharacteristics(
            asset_class=AssetClass.FUTURES,
            volatility=25,
            expected_return=12,
            sharpe_ratio=0.48,
            max_drawdown=40,
            liquidity_score=80,
            correlations={
                AssetClass.EQUITIES: 0.5,
                AssetClass.OPTIONS: 0.4,
                AssetClass.ETF: 0.6,
                AssetClass.FOREX: 0.3,
                AssetClass.CRYPTO: 0.15,
            },
            market_size=15e12,
            transaction_cost=0.002,
            minimum_investment=1000,
        ),
        AssetClassCharacteristics(
            asset_class=AssetClass.ETF,
            volatility=12,
            expected_return=7,
            sharpe_ratio=0.58,
            max_drawdown=20,
            liquidity_score=98,
            correlations={
                AssetClass.EQUITIES: 0.85,
                AssetClass.OPTIONS: 0.55,
                AssetClass.FUTURES: 0.6,
                AssetClass.FOREX: 0.15,
                AssetClass.CRYPTO: 0.25,
            },
            market_size=8e12,
            transaction_cost=0.001,
            minimum_investment=1,
        ),
        AssetClassCharacteristics(
            asset_class=AssetClass.FOREX,
            volatility=10,
            expected_return=4,
            sharpe_ratio=0.4,
            max_drawdown=15,
            liquidity_score=99,
            correlations={
                AssetClass.EQUITIES: 0.2,
                AssetClass.OPTIONS: 0.1,
                AssetClass.FUTURES: 0.3,
                AssetClass.ETF: 0.15,
                AssetClass.CRYPTO: 0.1,
            },
            market_size=7e15,
            transaction_cost=0.0005,
            minimum_investment=100,
        ),
        AssetClassCharacteristics(
            asset_class=AssetClass.CRYPTO,
            volatility=60,
            expected_return=25,
            sharpe_ratio=0.42,
            max_drawdown=80,
            liquidity_score=60,
            correlations={
                AssetClass.EQUITIES: 0.3,
                AssetClass.OPTIONS: 0.2,
                AssetClass.FUTURES: 0.15,
                AssetClass.ETF: 0.25,
                AssetClass.FOREX: 0.1,
            },
            market_size=2e12,
            transaction_cost=0.01,
            minimum_investment=10,
        ),
    ]


@pytest.fixture
def asset_characteristics() -> list[AssetClassCharacteristics]:
    """Characteristics for every asset class."""
    return make_asset_characteristics()


@pytest.fixture
def characteristics_map(asset_characteristics) -> dict:
    """Characteristics keyed by asset class."""
    return {c.asset_class: c for c in asset_characteristics}


# =========================
# Engine Fixtures
# =========================

@pytest.fixture
def engine_config() -> EngineConfig:
    """Default engine configuration, independent of the environment."""
    return EngineConfig()


@pytest.fixture
def engine(engine_config) -> AssetAllocationEngine:
    """Engine with default configuration."""
    return AssetAllocationEngine(engine_config)


@pytest.fixture
def allocation_input_factory(market_metrics, asset_characteristics):
    """Build allocation inputs around the shared market and asset fixtures."""
    def _make(**overrides) -> AllocationInput:
        data = {
            "account_size": 100_000,
            "market_metrics": market_metrics,
            "asset_characteristics": asset_characteristics,
        }
        data.update(overrides)
        return AllocationInput(**data)
    return _make
