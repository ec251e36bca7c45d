"""Custom exceptions for SmartLedger"""


class SmartLedgerError(Exception):
    """Base exception for SmartLedger errors"""
    pass


class FormatError(SmartLedgerError):
    """Structurally invalid input (e.g. missing header or data rows)"""
    pass


class ParseError(SmartLedgerError):
    """Row-level decode failure"""
    pass


class CollaboratorError(SmartLedgerError):
    """Narrative agent call failure or unusable response"""
    pass


class ConfigurationError(SmartLedgerError):
    """Configuration loading errors"""
    pass
