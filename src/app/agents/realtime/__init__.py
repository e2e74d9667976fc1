"""Real-time campus agents backed by the live feed tables.

Exports:
    TransportationAgent: Shuttle tracking.
    AlertsAgent: Active campus alerts.
    ParkingAgent: Lot availability.
    FacilityAgent: Facility occupancy and service wait times.
"""

from src.app.agents.realtime.alerts import AlertsAgent
from src.app.agents.realtime.facility import FacilityAgent
from src.app.agents.realtime.parking import ParkingAgent
from src.app.agents.realtime.transportation import TransportationAgent

__all__ = [
    "AlertsAgent",
    "FacilityAgent",
    "ParkingAgent",
    "TransportationAgent",
]
