# noqa: F401 to ensure models are imported for metadata
from apontt.models.contract import AuthorizationTerm, Contract
from apontt.models.crm import Activity, Opportunity
from apontt.models.customer import Customer
from apontt.models.partner import Partner
from apontt.models.payment import Payment
from apontt.models.user import User

__all__ = [
    "Activity",
    "AuthorizationTerm",
    "Contract",
    "Customer",
    "Opportunity",
    "Partner",
    "Payment",
    "User",
]
