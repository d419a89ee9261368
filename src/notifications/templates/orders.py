"""Order templates — sent to buyers and sellers as an order moves along."""

from notifications.notification.notification import NotificationType


class OrderStatusTemplate:
    notification_type = NotificationType.ORDER_STATUS.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        status = context.get("status", "updated")
        message = context.get("detail") or f"Your order #{order_id} status has been updated to {status}."
        return {"title": "Order Update", "message": message}


class OrderConfirmedTemplate:
    notification_type = NotificationType.ORDER_CONFIRMED.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        return {
            "title": "Order Confirmed",
            "message": f"Your order #{order_id} has been confirmed by the seller and is being processed.",
        }


class OrderRejectedTemplate:
    notification_type = NotificationType.ORDER_REJECTED.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        message = f"We're sorry, your order #{order_id} has been rejected by the seller."
        if context.get("reason"):
            message += f" Reason: {context['reason']}"
        return {"title": "Order Rejected", "message": message}


class OrderCancelledTemplate:
    notification_type = NotificationType.ORDER_CANCELLED.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        message = f"Order #{order_id} has been cancelled by the buyer."
        if context.get("reason"):
            message += f" Reason: {context['reason']}"
        return {"title": "Order Cancelled", "message": message}


class NewOrderTemplate:
    notification_type = NotificationType.NEW_ORDER.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        count = context.get("item_count", 0)
        noun = "item" if count == 1 else "items"
        return {
            "title": "New Order Received",
            "message": f"You have a new order #{order_id} with {count} {noun} awaiting your confirmation.",
        }
