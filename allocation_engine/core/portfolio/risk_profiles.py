"""
Risk Profiles Configuration

Defines the five risk profiles (Conservative through Aggressive) with
their base asset-class weights and risk ceilings, plus inference of a
profile from account characteristics when the caller does not state one.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, TYPE_CHECKING
from enum import Enum

from allocation_engine.utils.exceptions import ConfigurationError
from allocation_engine.utils.logger import get_logger

if TYPE_CHECKING:
    from allocation_engine.schemas.allocation import AllocationPreferences


logger = get_logger(__name__)


class AssetClass(str, Enum):
    """Asset class categories."""
    EQUITIES = "EQUITIES"
    OPTIONS = "OPTIONS"
    FUTURES = "FUTURES"
    ETF = "ETF"
    FOREX = "FOREX"
    CRYPTO = "CRYPTO"


class RiskProfile(str, Enum):
    """Investor risk tolerance tiers, least to most aggressive."""
    CONSERVATIVE = "CONSERVATIVE"
    MODERATE_CONSERVATIVE = "MODERATE_CONSERVATIVE"
    MODERATE = "MODERATE"
    MODERATE_AGGRESSIVE = "MODERATE_AGGRESSIVE"
    AGGRESSIVE = "AGGRESSIVE"


@dataclass(frozen=True)
class DefaultRiskProfile:
    """
    Static characteristics of a risk profile.
    
    Base allocations are fractions per asset class and need not sum
    to 1.0; every consumer normalizes before use.
    """
    profile: RiskProfile
    description: str
    base_allocations: Mapping[AssetClass, float] = field(default_factory=dict)
    
    # Risk ceilings (percent)
    max_volatility: float = 15.0
    max_drawdown: float = 20.0
    target_return: float = 10.0
    
    # Overall risk score (0-100)
    risk_score: int = 50
    
    def __post_init__(self):
        object.__setattr__(
            self, "base_allocations", MappingProxyType(dict(self.base_allocations))
        )
    
    def to_dict(self) -> dict:
        return {
            "profile": self.profile.value,
            "description": self.description,
            "base_allocations": {ac.value: w for ac, w in self.base_allocations.items()},
            "max_volatility": self.max_volatility,
            "max_drawdown": self.max_drawdown,
            "target_return": self.target_return,
            "risk_score": self.risk_score,
        }


# ==================== Predefined Profiles ====================

CONSERVATIVE_PROFILE = DefaultRiskProfile(
    profile=RiskProfile.CONSERVATIVE,
    description="Capital preservation focused with minimal volatility",
    base_allocations={
        AssetClass.EQUITIES: 0.20,
        AssetClass.OPTIONS: 0.05,
        AssetClass.FUTURES: 0.00,
        AssetClass.ETF: 0.50,
        AssetClass.FOREX: 0.10,
        AssetClass.CRYPTO: 0.00,
    },
    max_volatility=8,
    max_drawdown=10,
    target_return=5,
    risk_score=20,
)


MODERATE_CONSERVATIVE_PROFILE = DefaultRiskProfile(
    profile=RiskProfile.MODERATE_CONSERVATIVE,
    description="Income focused with moderate growth potential",
    base_allocations={
        AssetClass.EQUITIES: 0.30,
        AssetClass.OPTIONS: 0.10,
        AssetClass.FUTURES: 0.05,
        AssetClass.ETF: 0.40,
        AssetClass.FOREX: 0.10,
        AssetClass.CRYPTO: 0.05,
    },
    max_volatility=12,
    max_drawdown=15,
    target_return=7,
    risk_score=35,
)


MODERATE_PROFILE = DefaultRiskProfile(
    profile=RiskProfile.MODERATE,
    description="Balanced growth and income with managed volatility",
    base_allocations={
        AssetClass.EQUITIES: 0.40,
        AssetClass.OPTIONS: 0.15,
        AssetClass.FUTURES: 0.10,
        AssetClass.ETF: 0.25,
        AssetClass.FOREX: 0.05,
        AssetClass.CRYPTO: 0.05,
    },
    max_volatility=15,
    max_drawdown=20,
    target_return=10,
    risk_score=50,
)


MODERATE_AGGRESSIVE_PROFILE = DefaultRiskProfile(
    profile=RiskProfile.MODERATE_AGGRESSIVE,
    description="Growth focused with higher volatility tolerance",
    base_allocations={
        AssetClass.EQUITIES: 0.50,
        AssetClass.OPTIONS: 0.20,
        AssetClass.FUTURES: 0.10,
        AssetClass.ETF: 0.10,
        AssetClass.FOREX: 0.05,
        AssetClass.CRYPTO: 0.05,
    },
    max_volatility=20,
    max_drawdown=25,
    target_return=13,
    risk_score=70,
)


AGGRESSIVE_PROFILE = DefaultRiskProfile(
    profile=RiskProfile.AGGRESSIVE,
    description="Maximum growth with high volatility acceptance",
    base_allocations={
        AssetClass.EQUITIES: 0.45,
        AssetClass.OPTIONS: 0.25,
        AssetClass.FUTURES: 0.15,
        AssetClass.ETF: 0.05,
        AssetClass.FOREX: 0.05,
        AssetClass.CRYPTO: 0.05,
    },
    max_volatility=30,
    max_drawdown=35,
    target_return=18,
    risk_score=85,
)


# ==================== Profile Registry ====================

DEFAULT_RISK_PROFILES: Mapping[RiskProfile, DefaultRiskProfile] = MappingProxyType({
    RiskProfile.CONSERVATIVE: CONSERVATIVE_PROFILE,
    RiskProfile.MODERATE_CONSERVATIVE: MODERATE_CONSERVATIVE_PROFILE,
    RiskProfile.MODERATE: MODERATE_PROFILE,
    RiskProfile.MODERATE_AGGRESSIVE: MODERATE_AGGRESSIVE_PROFILE,
    RiskProfile.AGGRESSIVE: AGGRESSIVE_PROFILE,
})


def get_default_risk_profile(profile: RiskProfile | str) -> DefaultRiskProfile:
    """
    Get the static characteristics of a risk profile.
    
    Args:
        profile: RiskProfile member or its name (case-insensitive)
        
    Returns:
        The corresponding DefaultRiskProfile
        
    Raises:
        ConfigurationError: If the profile is not in the registry
    """
    try:
        key = RiskProfile(profile.upper()) if isinstance(profile, str) else profile
        return DEFAULT_RISK_PROFILES[key]
    except (ValueError, KeyError):
        raise ConfigurationError(
            f"Unknown risk profile: {profile}. "
            f"Valid profiles: {[p.value for p in RiskProfile]}",
            details={"profile": str(profile)},
        ) from None


def get_all_profiles() -> dict[RiskProfile, DefaultRiskProfile]:
    """Get all available risk profiles."""
    return dict(DEFAULT_RISK_PROFILES)


def get_base_allocations(profile: RiskProfile) -> dict[AssetClass, float]:
    """Starting weights for a profile, as a fresh mutable mapping."""
    base = get_default_risk_profile(profile).base_allocations
    return {ac: base.get(ac, 0.0) for ac in AssetClass}


# ==================== Profile Inference ====================

def _score_to_profile(score: float) -> RiskProfile:
    if score < 30:
        return RiskProfile.CONSERVATIVE
    if score < 45:
        return RiskProfile.MODERATE_CONSERVATIVE
    if score < 60:
        return RiskProfile.MODERATE
    if score < 75:
        return RiskProfile.MODERATE_AGGRESSIVE
    return RiskProfile.AGGRESSIVE


def infer_risk_score(
    account_size: float,
    preferences: Optional["AllocationPreferences"] = None,
) -> int:
    """
    Score risk appetite on a 0-100 scale centred on MODERATE (50).
    
    Larger accounts and looser drawdown/return preferences push the score
    up; small accounts, tight preferences and exclusions push it down.
    """
    score = 50
    
    if account_size < 10_000:
        score -= 10
    elif account_size > 100_000:
        score += 10
    
    if preferences is not None:
        if preferences.max_drawdown:
            if preferences.max_drawdown < 15:
                score -= 15
            elif preferences.max_drawdown > 25:
                score += 15
        
        if preferences.target_return:
            if preferences.target_return < 6:
                score -= 10
            elif preferences.target_return > 12:
                score += 10
        
        score -= len(preferences.excluded_asset_classes) * 5
    
    return score


def resolve_risk_profile(
    account_size: float,
    risk_profile: Optional[RiskProfile] = None,
    preferences: Optional["AllocationPreferences"] = None,
) -> RiskProfile:
    """
    Return the caller's profile, or infer one when none was given.
    
    Never fails; any account size and preference combination maps to
    some profile.
    """
    if risk_profile is not None:
        return risk_profile
    
    score = infer_risk_score(account_size, preferences)
    inferred = _score_to_profile(score)
    logger.debug(f"Inferred risk profile {inferred.value} from score {score}")
    return inferred
