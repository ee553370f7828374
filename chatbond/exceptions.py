"""
Exception types raised by chatbond
"""


class ChatbondError(Exception):
    """Base class for chatbond errors."""


class ParseError(ChatbondError, ValueError):
    """Raised when no conversational messages can be extracted from an export."""


class ClassificationTimeout(ChatbondError, TimeoutError):
    """Raised when the offloaded classification pass exceeds its time budget."""


class EnrichmentError(ChatbondError):
    """
    Raised inside the enrichment client when a remote call fails.

    `category` is one of "quota", "not_found" or "other". Never escapes the
    enrichment boundary; callers receive None instead.
    """

    def __init__(self, message: str, category: str = "other"):
        super().__init__(message)
        self.category = category
