"""Pending transaction endpoints."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from zkcloud.dependencies import get_store
from zkcloud.storage.store import LocalStorage

router = APIRouter(tags=["Transactions"])


class AddTransactionsRequest(BaseModel):
    transactions: list[str] = Field(..., min_length=1)


@router.post("/transactions", status_code=201)
async def add_transactions(
    body: AddTransactionsRequest,
    store: LocalStorage = Depends(get_store),
) -> dict:
    tx_ids = await store.add_transactions(body.transactions)
    return {"tx_ids": tx_ids}


@router.get("/transactions")
async def list_transactions(store: LocalStorage = Depends(get_store)) -> list[dict]:
    return [record.model_dump(mode="json") for record in await store.get_transactions()]


@router.delete("/transactions/{tx_id}", status_code=204)
async def delete_transaction(
    tx_id: str,
    store: LocalStorage = Depends(get_store),
) -> None:
    await store.delete_transaction(tx_id)
