"""UI Screens."""

from .hub import HubScreen
from .picker import PickerScreen
from .result import ResultScreen

__all__ = ["HubScreen", "PickerScreen", "ResultScreen"]
