"""Campaign Q&A templates — owners get questions, askers get replies."""

from notifications.notification.notification import NotificationType

_PREVIEW_LENGTH = 80


def _preview(text):
    text = (text or "").strip()
    return text if len(text) <= _PREVIEW_LENGTH else text[: _PREVIEW_LENGTH - 3] + "..."


class NewQuestionTemplate:
    notification_type = NotificationType.NEW_QUESTION.value

    @staticmethod
    def render(context: dict) -> dict:
        title = context.get("campaign_title") or "your campaign"
        return {"title": "New Question", "message": f'New question on {title}: "{_preview(context.get("text"))}"'}


class NewReplyTemplate:
    notification_type = NotificationType.NEW_REPLY.value

    @staticmethod
    def render(context: dict) -> dict:
        title = context.get("campaign_title") or "a campaign"
        return {
            "title": "New Reply",
            "message": f'The owner of {title} replied to your question: "{_preview(context.get("text"))}"',
        }
