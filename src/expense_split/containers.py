"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from expense_split.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from expense_split.config import Settings
from expense_split.services.access import AccessPolicy
from expense_split.services.cleanup import CleanupScheduler
from expense_split.services.sessions import SessionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_service: SessionService
    cleanup_scheduler: CleanupScheduler
    close_resources: Callable[[], Awaitable[None]]


def build_policy(settings: Settings) -> AccessPolicy:
    """Build the session duration policy from settings."""
    return AccessPolicy(
        default_duration_hours=settings.default_session_duration_hours,
        max_duration_hours=settings.max_session_duration_hours,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    session_service = SessionService(
        repository=SupabaseSessionRepository(supabase_client),
        policy=build_policy(resolved_settings),
    )
    cleanup_scheduler = CleanupScheduler(
        session_service, interval_hours=resolved_settings.cleanup_interval_hours
    )

    async def close_resources() -> None:
        if cleanup_scheduler.running:
            cleanup_scheduler.stop()

    return AppContainer(
        settings=resolved_settings,
        session_service=session_service,
        cleanup_scheduler=cleanup_scheduler,
        close_resources=close_resources,
    )
