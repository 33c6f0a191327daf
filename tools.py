from algorithms import CalendarTools, MathTools, SessionStats

__all__ = ["CalendarTools", "MathTools", "SessionStats"]
