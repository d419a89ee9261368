"""CampaignQuestion aggregate — public Q&A on a campaign page.

Any signed-in user can ask a question about a campaign. Only the campaign
owner answers; replies accumulate on the question in the order they were
written. The asker or the campaign owner can take a question down, which
hides it from the campaign page while keeping the record.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, Identifier, Text

from crowdfunding.domain import crowdfunding
from crowdfunding.question.events import QuestionAnswered, QuestionAsked, QuestionDeleted
from shared.access import AccessDenied

MAX_TEXT_LENGTH = 1000


def _clean_text(text, field_name="text"):
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValidationError({field_name: ["Text is required"]})
    if len(cleaned) > MAX_TEXT_LENGTH:
        raise ValidationError({field_name: [f"Text cannot exceed {MAX_TEXT_LENGTH} characters"]})
    return cleaned


def _aware(value):
    return value if value.tzinfo else value.replace(tzinfo=UTC)


@crowdfunding.entity(part_of="CampaignQuestion")
class QuestionReply:
    replied_by = Identifier(required=True)
    text = Text(required=True)
    replied_at = DateTime()


@crowdfunding.aggregate
class CampaignQuestion:
    campaign_id = Identifier(required=True)
    asked_by = Identifier(required=True)
    text = Text(required=True)
    replies = HasMany(QuestionReply)
    is_deleted = Boolean(default=False)
    deleted_by = Identifier()
    deleted_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def ask(cls, campaign, asked_by, text):
        text = _clean_text(text)
        now = datetime.now(UTC)
        question = cls(
            campaign_id=str(campaign.id),
            asked_by=asked_by,
            text=text,
            created_at=now,
            updated_at=now,
        )
        question.raise_(
            QuestionAsked(
                question_id=str(question.id),
                campaign_id=str(campaign.id),
                campaign_owner_id=str(campaign.seller_id),
                campaign_title=campaign.title,
                asked_by=str(asked_by),
                text=text,
                asked_at=now,
            )
        )
        return question

    def _assert_campaign(self, campaign):
        if str(campaign.id) != str(self.campaign_id):
            raise ValidationError({"campaign_id": ["Question does not belong to this campaign"]})

    def reply(self, campaign, actor_id, text):
        """Append the campaign owner's answer."""
        self._assert_campaign(campaign)
        campaign.assert_owned_by(actor_id)
        text = _clean_text(text)

        now = datetime.now(UTC)
        self.add_replies(QuestionReply(replied_by=actor_id, text=text, replied_at=now))
        self.updated_at = now
        self.raise_(
            QuestionAnswered(
                question_id=str(self.id),
                campaign_id=str(self.campaign_id),
                campaign_title=campaign.title,
                asked_by=str(self.asked_by),
                replied_by=str(actor_id),
                text=text,
                replied_at=now,
            )
        )

    def can_delete(self, campaign, actor_id):
        return str(actor_id) in (str(self.asked_by), str(campaign.seller_id))

    def delete(self, campaign, actor_id):
        self._assert_campaign(campaign)
        if not self.can_delete(campaign, actor_id):
            raise AccessDenied("Only the asker or the campaign owner can delete this question")

        now = datetime.now(UTC)
        self.is_deleted = True
        self.deleted_by = actor_id
        self.deleted_at = now
        self.updated_at = now
        self.raise_(
            QuestionDeleted(
                question_id=str(self.id),
                campaign_id=str(self.campaign_id),
                deleted_by=str(actor_id),
                deleted_at=now,
            )
        )

    def ordered_replies(self):
        return sorted(self.replies, key=lambda r: _aware(r.replied_at))

