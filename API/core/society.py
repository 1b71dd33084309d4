"""
Society context management for multi-tenancy.

Automatic society isolation via SQLAlchemy events:
1. Auto-filter: SELECT queries on society-scoped models get WHERE society_id=X
2. Auto-set: new SocietyBaseModel instances get society_id automatically
"""

from contextvars import ContextVar
from typing import Optional

from loguru import logger
from sqlalchemy import event
from sqlalchemy.orm import Session, with_loader_criteria

from database.base import SocietyBaseModel


# ==================== CONTEXT VARIABLES ====================

_current_society_id: ContextVar[Optional[int]] = ContextVar('current_society_id', default=None)

_events_registered = False


def set_current_society(society_id: int):
    _current_society_id.set(society_id)

def get_current_society_id() -> Optional[int]:
    return _current_society_id.get()

def clear_current_society():
    _current_society_id.set(None)


# ==================== SETUP (call once at startup) ====================

def _auto_filter_society(orm_execute_state):
    if not orm_execute_state.is_select:
        return
    society_id = _current_society_id.get()
    if society_id is None:
        return

    # with_loader_criteria on SocietyBaseModel applies to ALL subclasses
    orm_execute_state.statement = orm_execute_state.statement.options(
        with_loader_criteria(
            SocietyBaseModel,
            lambda cls: cls.society_id == society_id,
            include_aliases=True,
        )
    )


def _auto_set_society(target, args, kwargs):
    if kwargs.get('society_id') is None:
        society_id = _current_society_id.get()
        if society_id is not None:
            target.society_id = society_id


def setup_society_events():
    """
    Register SQLAlchemy events for automatic society isolation.
    Safe to call more than once.
    """
    global _events_registered
    if _events_registered:
        return

    event.listen(Session, "do_orm_execute", _auto_filter_society)
    event.listen(SocietyBaseModel, "init", _auto_set_society, propagate=True)
    _events_registered = True

    logger.info("Society auto-filtering registered")
