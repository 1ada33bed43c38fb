"""AI-assisted query interpretation."""

from .interpreter import InterpretationError, QueryInterpreter

__all__ = ["InterpretationError", "QueryInterpreter"]
