"""
Utility Functions Module for esh-cli

This module provides helper functions used by the command line shell.

Functions:
    setup_logging: Configures application logging
    ask: Prompts the user for a line of input
"""

import logging
from typing import Callable

logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.INFO) -> None:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def ask(prompt: str, lower: bool = True, input_fn: Callable[[str], str] = input) -> str:
    """Prompt the user and return the stripped answer.

    Args:
        prompt: Question shown to the user
        lower: Lowercase the answer (for y/n questions)
        input_fn: Function reading the answer (input() by default)

    Returns:
        The answer, or an empty string at end of input
    """
    try:
        answer = input_fn(f"\n{prompt} :").strip()
    except EOFError:
        return ""
    return answer.lower() if lower else answer
