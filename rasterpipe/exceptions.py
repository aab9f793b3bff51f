"""exceptions.py

Defines custom exception classes for the rasterpipe application, providing
clear error types for pipeline processing and configuration.

All exceptions inherit from RasterPipeError, allowing for unified error handling.
"""


class RasterPipeError(Exception):  # pylint: disable=too-few-public-methods
    """Base class for all rasterpipe application-specific errors.

    All custom exceptions in the rasterpipe application should inherit from this class.
    """


class ConfigurationError(RasterPipeError):  # pylint: disable=too-few-public-methods
    """Exception raised for errors related to application configuration.

    This error is used when configuration values are missing, invalid, or inconsistent.
    """
