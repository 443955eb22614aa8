"""
Dependency injection container for FastAPI.
Provides singleton-like behavior for services and repositories.
"""
from functools import lru_cache
from typing import Optional
from hot22_dashboard.core import config
from hot22_dashboard.repositories.api_repository import Hot22ApiRepository
from hot22_dashboard.repositories.history_repository import HistoryRepository
from hot22_dashboard.repositories.http_repository import HttpHot22ApiRepository
from hot22_dashboard.services.dashboard_service import DashboardService
from hot22_dashboard.services.history_ledger import HistoryLedger
from hot22_dashboard.services.notification_center import NotificationCenter


@lru_cache()
def get_api_repository() -> Hot22ApiRepository:
    """Get HttpHot22ApiRepository singleton instance."""
    return HttpHot22ApiRepository()


@lru_cache()
def get_history_repository() -> Optional[HistoryRepository]:
    """Get HistoryRepository singleton, or None when no table is configured."""
    if not config.settings.upload_history_table_name:
        return None
    return HistoryRepository()


@lru_cache()
def get_history_ledger() -> HistoryLedger:
    """Get HistoryLedger singleton, restored from storage when persistence is on."""
    ledger = HistoryLedger(
        max_history_size=config.settings.max_history_size,
        repository=get_history_repository()
    )
    ledger.load()
    return ledger


@lru_cache()
def get_notification_center() -> NotificationCenter:
    """Get NotificationCenter singleton instance."""
    return NotificationCenter(config.settings.max_notifications)


@lru_cache()
def get_dashboard_service() -> DashboardService:
    """Get DashboardService singleton instance with injected dependencies."""
    return DashboardService(
        api_repository=get_api_repository(),
        history_ledger=get_history_ledger(),
        notifications=get_notification_center()
    )
