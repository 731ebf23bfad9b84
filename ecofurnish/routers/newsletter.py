# ecofurnish/routers/newsletter.py
from fastapi import APIRouter, Depends, Request

from ecofurnish.schemas.newsletter import NewsletterResult, NewsletterSubscribe
from ecofurnish.services.newsletter_service import NewsletterService

router = APIRouter(prefix="/newsletter", tags=["Newsletter"])

MESSAGES = {
    "subscribed": "Thank you for joining our green movement!",
    "already_subscribed": "This email is already subscribed to our newsletter.",
}


def get_newsletter_service(request: Request) -> NewsletterService:
    return request.app.state.newsletter


@router.post("", response_model=NewsletterResult)
async def subscribe(
    payload: NewsletterSubscribe,
    service: NewsletterService = Depends(get_newsletter_service),
):
    """
    Subscribe an email address.

    Always succeeds from the visitor's point of view; a repeat
    sign-up is reported as `already_subscribed`.
    """
    result = await service.subscribe(payload.email)
    return NewsletterResult(status=result, message=MESSAGES[result])
