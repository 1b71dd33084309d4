"""
Expense service - society expense vouchers.
"""

from datetime import date
from typing import List, Optional, Tuple

from loguru import logger
from sqlalchemy import or_

from database.models import Expense
from services.base import SocietyServiceBase


class ExpenseService(SocietyServiceBase):

    def get_expense(self, expense_id: int) -> Optional[Expense]:
        return self._q(Expense).filter(Expense.id == expense_id).first()

    def get_expenses(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Expense]:
        q = self._q(Expense)
        if date_from:
            q = q.filter(Expense.expense_date >= date_from)
        if date_to:
            q = q.filter(Expense.expense_date <= date_to)
        if category:
            q = q.filter(Expense.category == category)
        if search:
            q = q.filter(or_(
                Expense.description.ilike(f"%{search}%"),
                Expense.paid_to.ilike(f"%{search}%"),
            ))
        return q.order_by(Expense.expense_date.desc(), Expense.id.desc()).all()

    def create_expense(self, data: dict) -> Tuple[Optional[Expense], str]:
        expense = Expense(society_id=self.society_id, **data)
        self.db.add(expense)
        self.db.commit()
        self.db.refresh(expense)
        logger.info(f"Expense {expense.id} recorded: {expense.amount} ({expense.category})")
        return expense, "Expense saved"

    def update_expense(self, expense_id: int, data: dict) -> Tuple[Optional[Expense], str]:
        expense = self.get_expense(expense_id)
        if not expense:
            return None, "Expense not found"
        if "description" in data and not (data["description"] or "").strip():
            return None, "Please enter a description"
        for key, value in data.items():
            setattr(expense, key, value)
        self.db.commit()
        return expense, "Expense saved"

    def delete_expense(self, expense_id: int) -> Tuple[bool, str]:
        expense = self.get_expense(expense_id)
        if not expense:
            return False, "Expense not found"
        self.db.delete(expense)
        self.db.commit()
        return True, "Expense deleted"
