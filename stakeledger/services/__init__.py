"""Service modules"""
from .event_relay import EventRelay
from .simulator import Simulator, StepResult, load_scenario

__all__ = ["EventRelay", "Simulator", "StepResult", "load_scenario"]
