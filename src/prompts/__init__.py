"""
Interactive operator I/O.
"""

from .operator import IdentifierPrompt, OperatorPrompt, YesNoConfirm

__all__ = ["IdentifierPrompt", "OperatorPrompt", "YesNoConfirm"]
