import os
from typing import Protocol

USE_NEW_TAX_CALCULATION = "FEATURE_FLAGS_USE_NEW_TAX_CALCULATION"

_TRUTHY = {"1", "true", "yes", "on"}


class FeatureFlagSource(Protocol):
    def is_reform_tax_enabled(self) -> bool:
        ...


class EnvFeatureFlags:
    """Feature flags read straight from the process environment.

    Nothing is cached: every call re-reads the variable, so flipping the flag
    takes effect on the next request.
    """

    def __init__(self, variable: str = USE_NEW_TAX_CALCULATION):
        self.variable = variable

    def is_reform_tax_enabled(self) -> bool:
        return os.getenv(self.variable, "false").strip().lower() in _TRUTHY


class StaticFeatureFlags:
    """Fixed flag values, for pinning a policy regardless of the environment."""

    def __init__(self, reform_tax_enabled: bool = False):
        self.reform_tax_enabled = reform_tax_enabled

    def is_reform_tax_enabled(self) -> bool:
        return self.reform_tax_enabled
