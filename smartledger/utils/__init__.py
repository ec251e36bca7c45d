"""Utility modules"""

from .config_loader import load_config, get_rules
from .errors import (
    SmartLedgerError,
    FormatError,
    ParseError,
    CollaboratorError,
    ConfigurationError
)

__all__ = [
    "load_config",
    "get_rules",
    "SmartLedgerError",
    "FormatError",
    "ParseError",
    "CollaboratorError",
    "ConfigurationError"
]
