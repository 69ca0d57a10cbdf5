"""
Configuration helper for the repository/service/orchestrator layers

Wires one tank system (AgBot, SmartFill, or a YAML-defined one) to the
shared database engine.

Usage:
    from fuel_runway.config_helper import setup_architecture

    repos, services, orchestrator = setup_architecture("smartfill")
    summary = orchestrator.recalculate_all()
"""

from typing import Any, Dict, Optional, Tuple

from sqlalchemy.engine import Engine

from fuel_runway.config import TankSystemProfile, load_tank_systems


def get_tank_profile(system: str) -> TankSystemProfile:
    """
    Look up a tank system profile by name.

    Raises:
        KeyError: Unknown system name
    """
    systems = load_tank_systems()
    if system not in systems:
        raise KeyError(
            f"Unknown tank system '{system}'. Available: {', '.join(sorted(systems))}"
        )
    return systems[system]


def create_repositories(
    profile: TankSystemProfile, engine: Optional[Engine] = None
) -> Dict[str, Any]:
    """
    Create repository instances for one tank system.

    Args:
        profile: Tank system table/column mapping
        engine: Optional engine. If None, uses the shared pooled engine

    Returns:
        Dict with repository instances:
        {
            'readings': ReadingsRepository,
            'tank': TankRepository,
        }
    """
    from fuel_runway.database_pool import get_engine
    from fuel_runway.repositories import ReadingsRepository, TankRepository

    if engine is None:
        engine = get_engine()

    return {
        "readings": ReadingsRepository(engine, profile),
        "tank": TankRepository(engine, profile),
    }


def create_services(repositories: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create service instances with injected repositories.

    Returns:
        Dict with service instances:
        {
            'engine': ForecastEngine,
            'forecast': ForecastService,
        }
    """
    from fuel_runway.services import ForecastEngine, ForecastService

    engine = ForecastEngine()
    return {
        "engine": engine,
        "forecast": ForecastService(
            reading_source=repositories["readings"],
            tank_source=repositories["tank"],
            engine=engine,
        ),
    }


def create_orchestrator(
    services: Dict[str, Any],
    repositories: Dict[str, Any],
    config: Optional[Any] = None,
):
    """
    Create RecalculationOrchestrator with all dependencies.

    The tank repository is both the tank list source and the persistence sink.
    """
    from fuel_runway.orchestrators import RecalculationOrchestrator

    return RecalculationOrchestrator(
        forecast_service=services["forecast"],
        tank_source=repositories["tank"],
        sink=repositories["tank"],
        config=config,
    )


# Quick setup function for convenience
def setup_architecture(
    system: str = "smartfill", engine: Optional[Engine] = None
) -> Tuple[Dict[str, Any], Dict[str, Any], Any]:
    """
    One-liner to set up the whole stack for a tank system.

    Returns:
        Tuple of (repositories, services, orchestrator)

    Example:
        repos, services, orchestrator = setup_architecture("agbot")
        result = services["forecast"].forecast("asset-17")
    """
    profile = get_tank_profile(system)
    repositories = create_repositories(profile, engine)
    services = create_services(repositories)
    orchestrator = create_orchestrator(services, repositories)

    return repositories, services, orchestrator
