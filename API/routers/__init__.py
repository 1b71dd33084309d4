from .settings import router as settings_router
from .master_data import router as master_data_router
from .flats import router as flats_router
from .bills import router as bills_router
from .payments import router as payments_router
from .expenses import router as expenses_router
from .reports import router as reports_router

__all__ = [
    'settings_router',
    'master_data_router',
    'flats_router',
    'bills_router',
    'payments_router',
    'expenses_router',
    'reports_router',
]
