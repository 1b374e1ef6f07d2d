from django.urls import path

from payments.handlers import CheckoutView, PaymentWebhookView

urlpatterns = [
    path("orders/<str:order_id>/checkout", CheckoutView.as_view(), name="order-checkout"),
    path("payments/webhook", PaymentWebhookView.as_view(), name="payment-webhook"),
]
