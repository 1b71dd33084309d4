"""
Expenses router - society expense vouchers.
Endpoint: /api/v1/{society_slug}/expenses/...
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_db
from database.models import Society, EXPENSE_CATEGORY_NAMES
from core.dependencies import resolve_society, raise_for_message
from schemas.expense import ExpenseCreate, ExpenseUpdate, ExpenseResponse, ExpenseListResponse
from services.base import to_money
from services.expenses import ExpenseService


router = APIRouter()


@router.get("/categories", summary="Expense categories")
async def get_categories():
    return {
        "data": [{"code": code, "name": name} for code, name in EXPENSE_CATEGORY_NAMES.items()]
    }


@router.get("", response_model=ExpenseListResponse, summary="List expenses")
async def get_expenses(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    expenses = ExpenseService(db, society.id).get_expenses(date_from, date_to, category, search)
    total = sum(to_money(e.amount) for e in expenses)
    return ExpenseListResponse(
        data=[ExpenseResponse.model_validate(e) for e in expenses],
        count=len(expenses),
        total_amount=float(total)
    )


@router.post("", status_code=status.HTTP_201_CREATED, summary="Record expense")
async def create_expense(
    data: ExpenseCreate,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    expense, msg = ExpenseService(db, society.id).create_expense(data.model_dump())
    if not expense:
        raise_for_message(msg)
    return {"success": True, "message": msg, "data": ExpenseResponse.model_validate(expense)}


@router.get("/{expense_id}", response_model=ExpenseResponse, summary="Expense detail")
async def get_expense(
    expense_id: int,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    expense = ExpenseService(db, society.id).get_expense(expense_id)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return expense


@router.put("/{expense_id}", summary="Update expense")
async def update_expense(
    expense_id: int,
    data: ExpenseUpdate,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    expense, msg = ExpenseService(db, society.id).update_expense(
        expense_id, data.model_dump(exclude_unset=True)
    )
    if not expense:
        raise_for_message(msg)
    return {"success": True, "message": msg, "data": ExpenseResponse.model_validate(expense)}


@router.delete("/{expense_id}", summary="Delete expense")
async def delete_expense(
    expense_id: int,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    ok, msg = ExpenseService(db, society.id).delete_expense(expense_id)
    if not ok:
        raise_for_message(msg)
    return {"success": True, "message": msg}
