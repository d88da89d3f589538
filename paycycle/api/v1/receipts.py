"""POST /v1/receipts/analyze - receipt image to draft transactions"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from paycycle.api.v1.schemas import ReceiptDraftSchema, ReceiptRequest, ReceiptResponse
from paycycle.api.dependencies import get_request_id, get_text_extraction_client
from paycycle.infrastructure.clients.text_extraction import TextExtractionClient
from paycycle.domain.receipts import parse_receipt_text
from paycycle.domain.exceptions import TextExtractionError
from paycycle.infrastructure.observability.metrics import extraction_failures_counter

router = APIRouter()


@router.post("/receipts/analyze", response_model=ReceiptResponse)
async def analyze_receipt(
    request_body: ReceiptRequest,
    request: Request,
    extraction_client: TextExtractionClient = Depends(get_text_extraction_client),
):
    """
    Extract a draft transaction from a receipt image.

    Flow:
    1. Send the image to the text-extraction service
    2. Parse the first amount-like and date-like tokens from the text
    3. Return drafts for the user to review; nothing is saved

    An image with no recognizable text yields no drafts.
    """
    request_id = get_request_id(request)

    try:
        text = await extraction_client.extract_text(request_body.image_base64)
    except TextExtractionError as e:
        extraction_failures_counter.inc()
        logging.error(f"Text extraction error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Text extraction service unavailable")

    if not text.strip():
        return ReceiptResponse(transactions=[])

    draft = parse_receipt_text(text)
    logging.info(
        "Receipt analyzed",
        extra={
            "request_id": request_id,
            "amount_found": draft.amount_cents is not None,
            "date_found": draft.date_text is not None,
        },
    )
    return ReceiptResponse(transactions=[ReceiptDraftSchema.from_domain(draft)])
