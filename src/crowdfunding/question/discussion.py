"""Campaign Q&A — ask, reply and delete commands with their handler."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from crowdfunding.campaign.campaign import Campaign
from crowdfunding.domain import crowdfunding
from crowdfunding.question.question import CampaignQuestion

logger = structlog.get_logger(__name__)


@crowdfunding.command(part_of="CampaignQuestion")
class AskQuestion:
    campaign_id = Identifier(required=True)
    asked_by = Identifier(required=True)
    text = Text()


@crowdfunding.command(part_of="CampaignQuestion")
class ReplyToQuestion:
    question_id = Identifier(required=True)
    replied_by = Identifier(required=True)
    text = Text()


@crowdfunding.command(part_of="CampaignQuestion")
class DeleteQuestion:
    question_id = Identifier(required=True)
    deleted_by = Identifier(required=True)


def load_question(question_id):
    """A question that is still visible, with the campaign it belongs to."""
    question = current_domain.repository_for(CampaignQuestion).get(question_id)
    if question.is_deleted:
        raise ObjectNotFoundError(f"Question {question_id} not found")
    campaign = current_domain.repository_for(Campaign).get(question.campaign_id)
    return question, campaign


@crowdfunding.command_handler(part_of=CampaignQuestion)
class CampaignQuestionHandler:
    @handle(AskQuestion)
    def ask_question(self, command):
        campaign = current_domain.repository_for(Campaign).get(command.campaign_id)
        question = CampaignQuestion.ask(campaign, command.asked_by, command.text)

        current_domain.repository_for(CampaignQuestion).add(question)
        logger.info("Question asked", question_id=str(question.id), campaign_id=str(campaign.id))
        return str(question.id)

    @handle(ReplyToQuestion)
    def reply_to_question(self, command):
        question, campaign = load_question(command.question_id)
        question.reply(campaign, command.replied_by, command.text)
        current_domain.repository_for(CampaignQuestion).add(question)

    @handle(DeleteQuestion)
    def delete_question(self, command):
        question, campaign = load_question(command.question_id)
        question.delete(campaign, command.deleted_by)
        current_domain.repository_for(CampaignQuestion).add(question)
        logger.info(
            "Question deleted",
            question_id=str(question.id),
            campaign_id=str(campaign.id),
            deleted_by=str(command.deleted_by),
        )
