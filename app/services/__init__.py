"""Services package - service class exports."""

from app.services.simulation.service import MonteCarloService

__all__ = [
    "MonteCarloService",
]
