from . import catalog, claims, invoices, payments

__all__ = ["catalog", "claims", "invoices", "payments"]
