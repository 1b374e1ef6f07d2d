from orders.services.order_service import OrderService, build_order_service

__all__ = ["OrderService", "build_order_service"]
