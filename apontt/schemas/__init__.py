from apontt.schemas import auth, common, contract, crm, customer, notification, partner, payment, reporting

__all__ = [
    "auth",
    "common",
    "contract",
    "crm",
    "customer",
    "notification",
    "partner",
    "payment",
    "reporting",
]
