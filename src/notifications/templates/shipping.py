"""Shipping templates — courier hand-off and progress."""

from notifications.notification.notification import NotificationType


class ShippingAssignedTemplate:
    notification_type = NotificationType.SHIPPING_ASSIGNED.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        courier = context.get("courier_name", "a courier")
        tracking_number = context.get("tracking_number", "N/A")
        return {
            "title": "Courier Assigned",
            "message": f"Your order #{order_id} will be delivered by {courier}. Tracking number: {tracking_number}.",
        }


class ShippingUpdateTemplate:
    notification_type = NotificationType.SHIPPING_UPDATE.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        status = context.get("status", "updated")
        message = f"Your shipment for order #{order_id} is now {status}."
        if context.get("location"):
            message += f" Current location: {context['location']}."
        return {"title": "Shipping Update", "message": message}
