from pydantic import BaseModel, ConfigDict
from decimal import Decimal


class TaxPolicy(BaseModel):
    """A named flat-rate tax policy."""

    name: str
    rate: Decimal

    model_config = ConfigDict(frozen=True)

    def calculate(self, total_amount: Decimal) -> Decimal:
        # Full precision: the product is never quantized here
        if total_amount < 0:
            raise ValueError(f"Total amount must be non-negative, got {total_amount}")
        return total_amount * self.rate


CURRENT_TAX_POLICY = TaxPolicy(name="Current", rate=Decimal("0.30"))
REFORM_TAX_POLICY = TaxPolicy(name="TaxReform", rate=Decimal("0.20"))


def select_tax_policy(reform_enabled: bool) -> TaxPolicy:
    return REFORM_TAX_POLICY if reform_enabled else CURRENT_TAX_POLICY
