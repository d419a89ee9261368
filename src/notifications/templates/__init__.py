"""Template registry — maps NotificationType to template classes.

Each template renders a title and message from event context data.
"""

from notifications.notification.notification import NotificationType
from notifications.templates.investments import InvestmentUpdateTemplate, PaymentConfirmationTemplate
from notifications.templates.orders import (
    NewOrderTemplate,
    OrderCancelledTemplate,
    OrderConfirmedTemplate,
    OrderRejectedTemplate,
    OrderStatusTemplate,
)
from notifications.templates.questions import NewQuestionTemplate, NewReplyTemplate
from notifications.templates.shipping import ShippingAssignedTemplate, ShippingUpdateTemplate
from notifications.templates.trades import TradeUpdateTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    NotificationType.ORDER_STATUS.value: OrderStatusTemplate,
    NotificationType.ORDER_CONFIRMED.value: OrderConfirmedTemplate,
    NotificationType.ORDER_REJECTED.value: OrderRejectedTemplate,
    NotificationType.ORDER_CANCELLED.value: OrderCancelledTemplate,
    NotificationType.NEW_ORDER.value: NewOrderTemplate,
    NotificationType.TRADE_UPDATE.value: TradeUpdateTemplate,
    NotificationType.INVESTMENT_UPDATE.value: InvestmentUpdateTemplate,
    NotificationType.PAYMENT_CONFIRMATION.value: PaymentConfirmationTemplate,
    NotificationType.NEW_QUESTION.value: NewQuestionTemplate,
    NotificationType.NEW_REPLY.value: NewReplyTemplate,
    NotificationType.SHIPPING_ASSIGNED.value: ShippingAssignedTemplate,
    NotificationType.SHIPPING_UPDATE.value: ShippingUpdateTemplate,
}


def get_template(notification_type: str):
    """Look up a template class by notification type string."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls
