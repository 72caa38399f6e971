"""
Error types for multidistances.

Two failure families cover the whole library: bad configuration (detected
before any distance is computed) and failed computation (a compressor or
metric blew up mid-build).
"""

from typing import Optional, Any, Dict, Tuple


class MultiDistancesError(Exception):
    """
    Base exception for all multidistances errors.
    
    Provides common functionality for error tracking and reporting.
    """
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize error.
        
        Args:
            message: Error message
            details: Optional detailed error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(MultiDistancesError):
    """
    Raised when inputs or settings make a computation impossible.
    
    Covers empty collections, unknown metric/modifier/strategy names and
    modifiers applied to non-composable metrics.
    """
    
    def __init__(self, message: str,
                 parameter: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration error.
        
        Args:
            message: Error message
            parameter: Name of the offending setting, if any
            details: Additional error context
        """
        super().__init__(message, details)
        self.parameter = parameter
        self.details.update({'parameter': parameter})


class ComputationError(MultiDistancesError):
    """
    Raised when a distance computation fails.
    
    Aborts the whole matrix build; a partially filled matrix is never returned.
    """
    
    def __init__(self, message: str,
                 codec: Optional[str] = None,
                 pair: Optional[Tuple[int, int]] = None,
                 details: Optional[Dict[str, Any]] = None):
        """
        Initialize computation error.
        
        Args:
            message: Error message
            codec: Compressor that failed, if any
            pair: Item indices being compared when the failure happened
            details: Additional error context
        """
        super().__init__(message, details)
        self.codec = codec
        self.pair = pair
        self.details.update({
            'codec': codec,
            'pair': pair
        })

