# routers/quote.py
import asyncio

from fastapi import APIRouter, Depends

from dependencies import get_notifier
from quotes import QuoteNotifier

router = APIRouter(
    prefix="/quote",
    tags=["Motivation"]
)


@router.get("")
async def get_quote(notifier: QuoteNotifier = Depends(get_notifier)):
    """
    Returns a motivational quote, or the fallback message if the quote
    service cannot be reached.
    """
    message = await asyncio.to_thread(notifier.notify)
    return {"message": message}
