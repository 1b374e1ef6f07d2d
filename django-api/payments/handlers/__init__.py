from payments.handlers.views import CheckoutView, PaymentWebhookView

__all__ = ["CheckoutView", "PaymentWebhookView"]
