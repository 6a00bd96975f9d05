"""
Allocation engine core: profiles, regimes, optimization and analytics.
"""
