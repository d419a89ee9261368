"""Investment templates — campaign owners and investors."""

from notifications.notification.notification import NotificationType


class InvestmentUpdateTemplate:
    notification_type = NotificationType.INVESTMENT_UPDATE.value

    @staticmethod
    def render(context: dict) -> dict:
        title = context.get("campaign_title") or "your campaign"
        amount = context.get("amount", 0)
        if context.get("action") == "received":
            message = f"A new investment of ₱{amount} was placed in {title}."
        else:
            message = f"Your investment of ₱{amount} in {title} has been {context.get('action', 'updated')}."
            if context.get("reason"):
                message += f" Reason: {context['reason']}"
        return {"title": "Investment Update", "message": message}


class PaymentConfirmationTemplate:
    notification_type = NotificationType.PAYMENT_CONFIRMATION.value

    @staticmethod
    def render(context: dict) -> dict:
        amount = context.get("amount", 0)
        receipt = context.get("receipt_number")
        message = f"Your payment of ₱{amount} has been confirmed."
        if receipt:
            message += f" Receipt number: {receipt}"
        return {"title": "Payment Confirmed", "message": message}
