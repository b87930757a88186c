"""
Teamprio - Feature Flags & Planner Settings
============================================

Selects the default planner and tunes the optimized mode.

Usage:
    from teamprio.feature_flags import PlannerFlags

    settings = PlannerFlags.get_settings()
    if settings.optimization_strategy == OptimizationStrategy.MIP:
        ...

Configuration via environment variables:
    TEAMPRIO_DEFAULT_MODE=optimized
    TEAMPRIO_OPTIMIZATION_STRATEGY=auto
    TEAMPRIO_SOLVER_BACKEND=scip
    TEAMPRIO_MIP_GAP=0.01
    TEAMPRIO_TIME_LIMIT_SEC=10
    TEAMPRIO_BACKTRACKING_MAX_PROJECTS=16
    TEAMPRIO_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .prioritization.models import OptimizationStrategy, PlanningMode
from .prioritization.optimal_planner import DEFAULT_BACKTRACKING_MAX_PROJECTS
from .prioritization.solver_interface import SolverBackend, SolverConfig

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Basic logging setup for scripts and the API server."""
    level_name = (level or os.environ.get("TEAMPRIO_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)


# ═══════════════════════════════════════════════════════════════════════════════
# SETTINGS
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class PlannerSettings:
    """
    Planner configuration.

    Defaults match the interactive app: MIP with a 0.5% gap.
    """
    default_mode: PlanningMode = PlanningMode.OPTIMIZED
    optimization_strategy: OptimizationStrategy = OptimizationStrategy.MIP
    solver_backend: SolverBackend = SolverBackend.ORTOOLS_CBC
    mip_gap: float = 0.005
    time_limit_sec: float = 30.0
    backtracking_max_projects: int = DEFAULT_BACKTRACKING_MAX_PROJECTS

    def solver_config(self) -> SolverConfig:
        return SolverConfig(
            backend=self.solver_backend,
            time_limit_sec=self.time_limit_sec,
            relative_gap=self.mip_gap,
        )


class PlannerFlags:
    """
    Singleton holding the active PlannerSettings.

    Loads from environment variables on first use.

    Usage:
        settings = PlannerFlags.get_settings()
        PlannerFlags.set_value("strategy", "backtracking")
        PlannerFlags.reset()
    """

    _instance: Optional[PlannerSettings] = None

    _ENUM_ENV = {
        "TEAMPRIO_OPTIMIZATION_STRATEGY": ("optimization_strategy", OptimizationStrategy),
        "TEAMPRIO_SOLVER_BACKEND": ("solver_backend", SolverBackend),
    }

    _NUMBER_ENV = {
        "TEAMPRIO_MIP_GAP": ("mip_gap", float),
        "TEAMPRIO_TIME_LIMIT_SEC": ("time_limit_sec", float),
        "TEAMPRIO_BACKTRACKING_MAX_PROJECTS": ("backtracking_max_projects", int),
    }

    @classmethod
    def _load_from_env(cls) -> PlannerSettings:
        """Build settings from TEAMPRIO_* variables; bad values are ignored."""
        settings = PlannerSettings()

        mode = os.environ.get("TEAMPRIO_DEFAULT_MODE")
        if mode:
            try:
                settings.default_mode = PlanningMode.parse(mode)
                logger.info(f"Planner setting default_mode = {mode}")
            except ValueError:
                logger.warning(f"Invalid value for TEAMPRIO_DEFAULT_MODE: {mode}")

        for env_var, (attr_name, enum_class) in cls._ENUM_ENV.items():
            value = os.environ.get(env_var)
            if value:
                try:
                    setattr(settings, attr_name, enum_class(value.lower()))
                    logger.info(f"Planner setting {attr_name} = {value}")
                except ValueError:
                    logger.warning(f"Invalid value for {env_var}: {value}")

        for env_var, (attr_name, cast) in cls._NUMBER_ENV.items():
            value = os.environ.get(env_var)
            if value:
                try:
                    number = cast(value)
                except ValueError:
                    logger.warning(f"Invalid value for {env_var}: {value}")
                    continue
                if number < 0:
                    logger.warning(f"Invalid value for {env_var}: {value}")
                    continue
                setattr(settings, attr_name, number)

        return settings

    @classmethod
    def get_settings(cls) -> PlannerSettings:
        """Current settings."""
        if cls._instance is None:
            cls._instance = cls._load_from_env()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop cached settings so the environment is read again."""
        cls._instance = None

    @classmethod
    def set_value(cls, key: str, value: Any) -> bool:
        """
        Change a setting at runtime (tests / admin).

        Args:
            key: mode, strategy, backend, mip_gap, time_limit_sec, backtracking_max_projects
            value: New value

        Returns:
            True if applied
        """
        settings = cls.get_settings()
        parsers = {
            "mode": ("default_mode", PlanningMode.parse),
            "strategy": ("optimization_strategy", lambda v: OptimizationStrategy(str(v).lower())),
            "backend": ("solver_backend", lambda v: SolverBackend(str(v).lower())),
            "mip_gap": ("mip_gap", float),
            "time_limit_sec": ("time_limit_sec", float),
            "backtracking_max_projects": ("backtracking_max_projects", int),
        }
        if key not in parsers:
            logger.warning(f"Unknown planner setting: {key}")
            return False

        attr_name, parse = parsers[key]
        try:
            parsed = parse(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid value {value!r} for {key}")
            return False
        if isinstance(parsed, (int, float)) and parsed < 0:
            logger.warning(f"Invalid value {value!r} for {key}")
            return False

        setattr(settings, attr_name, parsed)
        logger.info(f"Planner setting {attr_name} set to {value}")
        return True

    @classmethod
    def to_dict(cls) -> Dict[str, Any]:
        """Export settings as dict."""
        settings = cls.get_settings()
        return {
            "default_mode": settings.default_mode.value,
            "optimization_strategy": settings.optimization_strategy.value,
            "solver_backend": settings.solver_backend.value,
            "mip_gap": settings.mip_gap,
            "time_limit_sec": settings.time_limit_sec,
            "backtracking_max_projects": settings.backtracking_max_projects,
        }
