"""FastAPI dependency injection — provides the EngineManager for the app's lifetime."""

from __future__ import annotations

from docket_router.api.engine_manager import EngineManager

_engine_manager: EngineManager | None = None


def set_engine_manager(manager: EngineManager) -> None:
    global _engine_manager
    _engine_manager = manager


def reset_engine_manager() -> EngineManager | None:
    """Detach the current manager (app shutdown). Returns it so callers can stop it."""
    global _engine_manager
    manager, _engine_manager = _engine_manager, None
    return manager


def get_engine_manager() -> EngineManager:
    if _engine_manager is None:
        raise RuntimeError("No EngineManager — the app lifespan has not started or has already shut down.")
    return _engine_manager
