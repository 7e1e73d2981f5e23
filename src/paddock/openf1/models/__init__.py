"""OpenF1 data models."""

from paddock.openf1.models.car_data import CarData
from paddock.openf1.models.driver import Driver
from paddock.openf1.models.lap import Lap
from paddock.openf1.models.meeting import Meeting
from paddock.openf1.models.overtake import Overtake
from paddock.openf1.models.pit import Pit
from paddock.openf1.models.position import Position
from paddock.openf1.models.race_control import RaceControl
from paddock.openf1.models.session import Session
from paddock.openf1.models.session_result import SessionResult
from paddock.openf1.models.starting_grid import StartingGrid
from paddock.openf1.models.stint import Stint
from paddock.openf1.models.team_radio import TeamRadio
from paddock.openf1.models.weather import Weather

__all__ = [
    "CarData",
    "Driver",
    "Lap",
    "Meeting",
    "Overtake",
    "Pit",
    "Position",
    "RaceControl",
    "Session",
    "SessionResult",
    "StartingGrid",
    "Stint",
    "TeamRadio",
    "Weather",
]
