from apontt.services.activity import ActivityService
from apontt.services.auth import AuthService
from apontt.services.contracts import AuthorizationTermService, ContractService
from apontt.services.customers import CustomerService
from apontt.services.opportunities import OpportunityService
from apontt.services.partners import PartnerService
from apontt.services.payments import PaymentService
from apontt.services.reporting import ReportingService

__all__ = [
    "ActivityService",
    "AuthService",
    "AuthorizationTermService",
    "ContractService",
    "CustomerService",
    "OpportunityService",
    "PartnerService",
    "PaymentService",
    "ReportingService",
]
