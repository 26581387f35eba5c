from .payment_service import PaymentService, to_minor_units

__all__ = ["PaymentService", "to_minor_units"]
