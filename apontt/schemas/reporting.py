from decimal import Decimal

from pydantic import BaseModel


class MetricsRead(BaseModel):
    month_sales: Decimal
    new_leads: int
    conversion_rate: float
    active_partners: int
    sales_growth: float
    leads_growth: float
    conversion_growth: float
    partners_growth: float
    contracts_by_status: dict[str, int]
    payments_by_status: dict[str, int]
    signed_contracts_value: Decimal
    pending_payments_value: Decimal
