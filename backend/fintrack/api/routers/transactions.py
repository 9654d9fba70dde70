from fastapi import APIRouter, Depends, HTTPException, Response

from fintrack.api.deps import get_store
from fintrack.models.schemas import Transaction, TransactionCreate
from fintrack.services.finance_store import FinanceStore, RecordNotFoundError

router = APIRouter()


@router.get("", response_model=list[Transaction])
def list_transactions(user_id: str, store: FinanceStore = Depends(get_store)) -> list[Transaction]:
    try:
        return store.list_transactions(user_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.post("", response_model=Transaction, status_code=201)
def add_transaction(
    user_id: str,
    payload: TransactionCreate,
    store: FinanceStore = Depends(get_store),
) -> Transaction:
    try:
        return store.add_transaction(user_id, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.put("/{transaction_id}", response_model=Transaction)
def update_transaction(
    user_id: str,
    transaction_id: str,
    payload: TransactionCreate,
    store: FinanceStore = Depends(get_store),
) -> Transaction:
    try:
        return store.update_transaction(user_id, transaction_id, payload)
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.delete("/{transaction_id}", status_code=204)
def delete_transaction(
    user_id: str,
    transaction_id: str,
    store: FinanceStore = Depends(get_store),
) -> Response:
    try:
        store.delete_transaction(user_id, transaction_id)
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return Response(status_code=204)
