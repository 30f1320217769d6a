"""
API routers for the LLM admin backend.
"""

from .configurations import router as configurations_router
from .dashboard import router as dashboard_router
from .models import router as models_router
from .providers import router as providers_router
from .quick_test import router as quick_test_router
from .tasks import router as tasks_router

__all__ = [
    "configurations_router",
    "dashboard_router",
    "models_router",
    "providers_router",
    "quick_test_router",
    "tasks_router",
]
