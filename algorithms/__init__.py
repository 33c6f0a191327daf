from .calendar_tools import CalendarTools
from .math_tools import MathTools
from .session_stats import SessionStats

__all__ = ["CalendarTools", "MathTools", "SessionStats"]
