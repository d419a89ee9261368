"""Domain events for the CampaignQuestion aggregate."""

from protean.fields import DateTime, Identifier, String, Text

from crowdfunding.domain import crowdfunding


@crowdfunding.event(part_of="CampaignQuestion")
class QuestionAsked:
    __version__ = 1

    question_id = Identifier(required=True)
    campaign_id = Identifier(required=True)
    campaign_owner_id = Identifier(required=True)
    campaign_title = String()
    asked_by = Identifier(required=True)
    text = Text(required=True)
    asked_at = DateTime(required=True)


@crowdfunding.event(part_of="CampaignQuestion")
class QuestionAnswered:
    """The campaign owner replied to a question."""

    __version__ = 1

    question_id = Identifier(required=True)
    campaign_id = Identifier(required=True)
    campaign_title = String()
    asked_by = Identifier(required=True)
    replied_by = Identifier(required=True)
    text = Text(required=True)
    replied_at = DateTime(required=True)


@crowdfunding.event(part_of="CampaignQuestion")
class QuestionDeleted:
    __version__ = 1

    question_id = Identifier(required=True)
    campaign_id = Identifier(required=True)
    deleted_by = Identifier(required=True)
    deleted_at = DateTime(required=True)
