"""
Unit Tests - Recommendation Assembly
Tests for allocation records, rationale, warnings and metadata.
"""
import re
from datetime import datetime, timedelta, timezone

import pytest

from allocation_engine.core.optimizer.strategies import OptimizationObjective
from allocation_engine.core.portfolio.risk_profiles import AssetClass, RiskProfile
from allocation_engine.core.recommendation import (
    RecommendationAssembler,
    generate_recommendation_id,
)
from allocation_engine.schemas.allocation import (
    AllocationInput,
    AllocationPreferences,
    DiversificationMetrics,
    MarketCondition,
    PortfolioMetrics,
    RiskAnalysis,
    RiskLevel,
)


def make_portfolio_metrics(volatility: float = 10.0) -> PortfolioMetrics:
    return PortfolioMetrics(
        expected_return=8.0,
        expected_volatility=volatility,
        sharpe_ratio=0.4,
        sortino_ratio=0.57,
        max_drawdown=volatility * 1.5,
        value_at_risk_95=volatility * 1.645,
        conditional_var=volatility * 2.063,
        beta=1.0,
        alpha=-2.0,
        information_ratio=-0.4,
    )


def make_risk_analysis(
    risk_level: RiskLevel = RiskLevel.LOW,
    concentration: float = 20.0,
    liquidity: float = 5.0,
) -> RiskAnalysis:
    return RiskAnalysis(
        risk_score=30.0,
        risk_level=risk_level,
        systematic_risk=7.0,
        idiosyncratic_risk=3.0,
        tail_risk=12.0,
        liquidity_risk=liquidity,
        concentration_risk=concentration,
        currency_risk=5.0,
    )


def make_diversification() -> DiversificationMetrics:
    return DiversificationMetrics(
        diversification_ratio=1.2,
        herfindahl_index=0.3,
        effective_number_of_assets=3.3,
        average_correlation=0.35,
        max_pairwise_correlation=0.85,
        asset_class_diversity=50.0,
    )


@pytest.fixture
def assembler() -> RecommendationAssembler:
    return RecommendationAssembler(OptimizationObjective.MAX_SHARPE)


class TestRecommendationId:
    """Tests for recommendation identifiers."""
    
    def test_format(self):
        """Ids should be alloc_<epoch ms>_<7 hex chars>."""
        assert re.fullmatch(r"alloc_\d{13}_[0-9a-f]{7}", generate_recommendation_id())
    
    def test_unique(self):
        """Consecutive ids should differ."""
        assert generate_recommendation_id() != generate_recommendation_id()


class TestRationale:
    """Tests for rationale text and confidence."""
    
    def test_core_holding(self, assembler, characteristics_map):
        """Large liquid equity position."""
        text = assembler.generate_rationale(
            AssetClass.EQUITIES, 0.35, characteristics_map[AssetClass.EQUITIES], RiskProfile.MODERATE,
        )
        assert text == "35.0% allocation - Core holding, high liquidity"
    
    def test_conservative_etf(self, assembler, characteristics_map):
        """ETF under CONSERVATIVE should mention stability."""
        text = assembler.generate_rationale(
            AssetClass.ETF, 0.5, characteristics_map[AssetClass.ETF], RiskProfile.CONSERVATIVE,
        )
        assert text == (
            "50.0% allocation - Core holding, low volatility, high liquidity, "
            "diversification and stability"
        )
    
    def test_aggressive_options(self, assembler, characteristics_map):
        """OPTIONS under AGGRESSIVE should mention leveraged growth."""
        text = assembler.generate_rationale(
            AssetClass.OPTIONS, 0.2, characteristics_map[AssetClass.OPTIONS], RiskProfile.AGGRESSIVE,
        )
        assert text == (
            "20.0% allocation - Significant position, high growth potential, "
            "leveraged growth opportunities"
        )
    
    @pytest.mark.parametrize("weight,bucket", [
        (0.10, "Moderate allocation"),
        (0.05, "Tactical allocation"),
    ])
    def test_size_buckets(self, assembler, characteristics_map, weight, bucket):
        """Smaller weights should fall into the lower size buckets."""
        text = assembler.generate_rationale(
            AssetClass.FUTURES, weight, characteristics_map[AssetClass.FUTURES], RiskProfile.MODERATE,
        )
        assert text.startswith(f"{weight * 100:.1f}% allocation - {bucket}")
    
    def test_missing_characteristics(self, assembler):
        """Classes without characteristics get a plain rationale."""
        text = assembler.generate_rationale(AssetClass.FUTURES, 0.04, None, RiskProfile.MODERATE)
        assert text == "4.0% allocated to FUTURES"
    
    def test_confidence(self, assembler, characteristics_map):
        """Confidence grows with liquidity, capped at 0.95."""
        assert assembler.confidence(characteristics_map[AssetClass.EQUITIES]) == pytest.approx(0.95)
        assert assembler.confidence(characteristics_map[AssetClass.CRYPTO]) == pytest.approx(0.95)
        assert assembler.confidence(None) == 0.5


class TestBuildAllocations:
    """Tests for allocation record building."""
    
    def test_filters_and_sorts(self, assembler, characteristics_map):
        """Tiny weights should be dropped and the rest sorted descending."""
        weights = {
            AssetClass.EQUITIES: 0.3,
            AssetClass.ETF: 0.6995,
            AssetClass.FOREX: 0.0005,
        }
        allocations = assembler.build_allocations(
            weights, 10_000, characteristics_map, make_portfolio_metrics(10.0), RiskProfile.MODERATE,
        )
        assert [a.asset_class for a in allocations] == [AssetClass.ETF, AssetClass.EQUITIES]
        
        equities = allocations[1]
        assert equities.amount == pytest.approx(3_000)
        assert equities.risk_contribution == pytest.approx(0.3 * 18 / 10)
        assert equities.return_contribution == pytest.approx(3.0)
    
    def test_zero_portfolio_volatility(self, assembler):
        """Risk contribution should be 0 when portfolio volatility is 0."""
        allocations = assembler.build_allocations(
            {AssetClass.EQUITIES: 1.0}, 1_000, {}, make_portfolio_metrics(0.0), RiskProfile.MODERATE,
        )
        assert allocations[0].risk_contribution == 0
        assert allocations[0].confidence == 0.5


class TestMetadata:
    """Tests for methodology and scheduling."""
    
    def test_methodology(self, assembler):
        """Methodology combines the objective description and profile."""
        assert assembler.methodology(RiskProfile.MODERATE) == (
            "Sharpe ratio maximization with risk-adjusted return optimization "
            "tailored for MODERATE risk profile"
        )
    
    def test_methodology_flags(self, assembler):
        """ESG and tax flags should be surfaced in the methodology."""
        prefs = AllocationPreferences(esg_focused=True, tax_optimized=True)
        text = assembler.methodology(RiskProfile.AGGRESSIVE, prefs)
        assert text.endswith("; ESG focus requested; tax optimization requested")
    
    def test_next_rebalancing_date(self, assembler):
        """Default interval is 90 days unless a frequency is given."""
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert assembler.next_rebalancing_date(None, now) == now + timedelta(days=90)
        assert assembler.next_rebalancing_date(30, now) == now + timedelta(days=30)
    
    def test_configured_default_interval(self):
        """The default interval should come from the assembler's configuration."""
        assembler = RecommendationAssembler(default_rebalancing_days=30)
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert assembler.next_rebalancing_date(None, now) == now + timedelta(days=30)


class TestWarnings:
    """Tests for warning generation."""
    
    def test_no_warnings(self, assembler, allocation_input_factory):
        """A calm, diversified allocation should produce no warnings."""
        warnings = assembler.generate_warnings(
            {AssetClass.EQUITIES: 0.5, AssetClass.ETF: 0.5},
            make_risk_analysis(),
            allocation_input_factory(),
        )
        assert warnings == []
    
    def test_all_warnings(self, assembler, allocation_input_factory, market_metrics_factory):
        """Every threshold breached should produce all seven warnings in order."""
        allocation_input = allocation_input_factory(
            account_size=1_000,
            market_metrics=market_metrics_factory(volatility_index=26),
        )
        warnings = assembler.generate_warnings(
            {AssetClass.CRYPTO: 0.2, AssetClass.OPTIONS: 0.3, AssetClass.ETF: 0.5},
            make_risk_analysis(RiskLevel.HIGH, concentration=45, liquidity=35),
            allocation_input,
        )
        assert len(warnings) == 7
        assert warnings[0].startswith("Portfolio risk level is HIGH.")
        assert warnings[1].startswith("High concentration detected.")
        assert warnings[2].startswith("Some positions may have limited liquidity.")
        assert warnings[3].startswith("Small account size may limit diversification.")
        assert warnings[4].startswith("Market volatility is elevated.")
        assert warnings[5].startswith("Cryptocurrency allocation exceeds 15%.")
        assert warnings[6].startswith("Options allocation is significant.")
    
    def test_thresholds_are_strict(self, assembler, allocation_input_factory, market_metrics_factory):
        """Values exactly at a threshold should not warn."""
        allocation_input = allocation_input_factory(
            account_size=5_000,
            market_metrics=market_metrics_factory(volatility_index=25),
        )
        warnings = assembler.generate_warnings(
            {AssetClass.CRYPTO: 0.15, AssetClass.OPTIONS: 0.25, AssetClass.ETF: 0.6},
            make_risk_analysis(RiskLevel.MEDIUM, concentration=40, liquidity=30),
            allocation_input,
        )
        assert warnings == []


class TestAssemble:
    """Tests for the assembled recommendation."""
    
    def test_assemble(self, assembler, allocation_input_factory):
        """Assembled recommendations carry every section and metadata."""
        allocation_input = allocation_input_factory(
            preferences=AllocationPreferences(rebalancing_frequency=30),
        )
        recommendation = assembler.assemble(
            {AssetClass.EQUITIES: 0.6, AssetClass.ETF: 0.4},
            allocation_input,
            RiskProfile.MODERATE,
            MarketCondition.SIDEWAYS,
            make_portfolio_metrics(),
            make_risk_analysis(),
            make_diversification(),
        )
        assert recommendation.id.startswith("alloc_")
        assert recommendation.market_condition == MarketCondition.SIDEWAYS
        assert recommendation.rebalancing is None
        assert recommendation.next_rebalancing_date - recommendation.timestamp == timedelta(days=30)
        assert [a.asset_class for a in recommendation.allocations] == [
            AssetClass.EQUITIES, AssetClass.ETF,
        ]
        
        data = recommendation.to_dict()
        assert data["risk_profile"] == "MODERATE"
        assert data["allocations"][0]["asset_class"] == "EQUITIES"
