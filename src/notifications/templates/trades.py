"""Trade template — one message shape for every step of a negotiation."""

from notifications.notification.notification import NotificationType


class TradeUpdateTemplate:
    notification_type = NotificationType.TRADE_UPDATE.value

    @staticmethod
    def render(context: dict) -> dict:
        action = context.get("action", "updated")
        message = f"Your trade has been {action}."
        if context.get("reason"):
            message += f" Reason: {context['reason']}"
        return {"title": "Trade Update", "message": message}
