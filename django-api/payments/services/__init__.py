from payments.services.payment_service import PaymentService, build_payment_service

__all__ = ["PaymentService", "build_payment_service"]
