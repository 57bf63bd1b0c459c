"""GET/POST /v1/transactions, DELETE /v1/transactions/{id}"""

from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends

from finance_tracker.api.v1.schemas import MessageResponse, TransactionCreateRequest, TransactionSchema
from finance_tracker.api.dependencies import get_tracker
from finance_tracker.domain.models import EntityId
from finance_tracker.tracker import FinanceTracker

router = APIRouter()


@router.get("/transactions", response_model=List[TransactionSchema])
def list_transactions(tracker: FinanceTracker = Depends(get_tracker)):
    """Cached transactions in the order the finance service returned them"""
    return [TransactionSchema.from_domain(t) for t in tracker.transactions()]


@router.post("/transactions", response_model=TransactionSchema)
async def create_transaction(
    request_body: TransactionCreateRequest,
    tracker: FinanceTracker = Depends(get_tracker),
):
    created = await tracker.cache.add_transaction(
        amount=Decimal(str(request_body.amount)),
        description=request_body.description,
        type=request_body.type,
        category_id=request_body.category_id,
        on=request_body.date,
    )
    return TransactionSchema.from_domain(created)


@router.delete("/transactions/{transaction_id}", response_model=MessageResponse)
async def delete_transaction(transaction_id: EntityId, tracker: FinanceTracker = Depends(get_tracker)):
    await tracker.cache.delete_transaction(transaction_id)
    return MessageResponse(message="Transaction deleted")
