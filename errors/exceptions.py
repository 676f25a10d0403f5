"""
Custom exception classes for the Discord Ticket Bot.

This module defines the exceptions raised by the category registry, the
tenant configuration store and the owner commands, so every user-facing
failure carries both a technical message and a friendly one.
"""

from typing import Optional, Dict, Any


class TicketBotError(Exception):
    """
    Base exception for all ticket bot errors.

    All custom exceptions in the bot should inherit from this class
    to provide consistent error handling and logging.
    """

    def __init__(self, message: str, user_message: Optional[str] = None,
                 error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """
        Initialize TicketBotError.

        Args:
            message: Technical error message for logging
            user_message: User-friendly error message for display
            error_code: Optional error code for categorization
            details: Optional additional error details
        """
        super().__init__(message)
        self.user_message = user_message or message
        self.error_code = error_code
        self.details = details or {}


class DatabaseError(TicketBotError):
    """
    Exception raised when a document or database read/write fails.

    Fatal to the single operation in progress; no retry is attempted.
    """

    def __init__(self, message: str, operation: Optional[str] = None,
                 user_message: Optional[str] = None, **kwargs):
        """
        Initialize DatabaseError.

        Args:
            message: Technical error message
            operation: Storage operation that failed (e.g., 'replace:config.json')
            user_message: User-friendly error message
        """
        if not user_message:
            user_message = "A storage error occurred. Please try again later."

        super().__init__(message, user_message, error_code="DB_ERROR", **kwargs)
        self.operation = operation


class PermissionError(TicketBotError):
    """
    Exception raised when the caller is neither the bot owner nor the server owner.
    """

    def __init__(self, message: str, required_permission: Optional[str] = None,
                 user_message: Optional[str] = None, **kwargs):
        if not user_message:
            user_message = "❌ This command is only available to the bot owner or server owner."

        super().__init__(message, user_message, error_code="PERMISSION_ERROR", **kwargs)
        self.required_permission = required_permission


class ConfigurationError(TicketBotError):
    """
    Exception raised for configuration-related errors.

    This includes missing settings, invalid configuration values,
    and unreadable configuration documents.
    """

    def __init__(self, message: str, config_key: Optional[str] = None,
                 user_message: Optional[str] = None, **kwargs):
        if not user_message:
            user_message = "Bot configuration error. Please contact an administrator."

        super().__init__(message, user_message, error_code="CONFIG_ERROR", **kwargs)
        self.config_key = config_key


class ValidationError(TicketBotError):
    """
    Exception raised for input validation errors.
    """

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Optional[Any] = None, user_message: Optional[str] = None, **kwargs):
        """
        Initialize ValidationError.

        Args:
            message: Technical error message
            field: The field that failed validation
            value: The invalid value
            user_message: User-friendly error message
        """
        if not user_message:
            user_message = "Invalid input provided. Please check your input and try again."

        super().__init__(message, user_message, error_code="VALIDATION_ERROR", **kwargs)
        self.field = field
        self.value = value


class DuplicateCategoryError(TicketBotError):
    """
    Exception raised when a category with the same normalized ID already exists.
    """

    def __init__(self, message: str, category_id: Optional[str] = None,
                 user_message: Optional[str] = None, **kwargs):
        if not user_message:
            user_message = "❌ A default category with this ID already exists."

        super().__init__(message, user_message, error_code="DUPLICATE_CATEGORY", **kwargs)
        self.category_id = category_id


class CategoryNotFoundError(TicketBotError):
    """
    Exception raised when a category ID is not present in the registry.
    """

    def __init__(self, message: str, category_id: Optional[str] = None,
                 user_message: Optional[str] = None, **kwargs):
        """
        Initialize CategoryNotFoundError.

        Args:
            message: Technical error message
            category_id: ID of the category that was not found
            user_message: User-friendly error message
        """
        if not user_message:
            user_message = "❌ Default category not found."

        super().__init__(message, user_message, error_code="CATEGORY_NOT_FOUND", **kwargs)
        self.category_id = category_id
