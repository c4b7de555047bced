"""
Centralized logging using Loguru with context-aware verbosity.

This module provides a LOG() function that respects the current ParseState's
verbosity level without requiring explicit state passing.

Features:
- Context-aware logging tied to ParseState verbosity
- Rich formatting with timestamps, colors, and metadata
- Thread-safe using contextvars (concurrent parse calls do not share state)

Usage:
    from lib.log import LOG, state_connectToLogger, state_disconnectFromLogger

    # At start of a parse call:
    token = state_connectToLogger(state)
    try:
        # Anywhere in that context:
        LOG("Stage summaries appear if verbosity >= 1", level=1)
        LOG("Per-rule counts appear if verbosity >= 2", level=2)
        LOG("Per-match trace appears if verbosity >= 3", level=3)
    finally:
        # The state must not outlive the call
        state_disconnectFromLogger(token)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar, Token
import sys

# Context variable to hold current ParseState
_parse_state: ContextVar[Optional[Any]] = ContextVar('parse_state', default=None)

# Configure loguru with brushparse-specific format
logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> Token:
    """
    Connect a ParseState to the logging context.

    Parser.parse() calls this once per call so the state's verbosity
    is visible to LOG() calls made by every stage of that call.

    Args:
        state: ParseState instance with verbosity attribute

    Returns:
        Token to hand to state_disconnectFromLogger() when the call ends
    """
    return _parse_state.set(state)


def state_disconnectFromLogger(token: Token) -> None:
    """
    Restore the logging context that was current before the matching
    state_connectToLogger() call, releasing the connected state.
    """
    _parse_state.reset(token)


def state_connected() -> Optional[Any]:
    """Get the ParseState currently connected to the logger, if any"""
    return _parse_state.get()


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=stages, 2=rules, 3=matches)
        **kwargs: Additional loguru metadata
    """
    state = _parse_state.get()

    if state and hasattr(state, 'verbosity') and state.verbosity >= level:
        logger.opt(depth=1).debug(message, **kwargs)
