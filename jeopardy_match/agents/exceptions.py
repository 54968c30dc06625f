"""
Exceptions for agent-related errors.
"""


class CategoryGenerationError(Exception):
    """Raised when the LLM cannot produce a usable category list."""

    def __init__(self, count: int, message: str = ""):
        self.count = count
        self.message = message or f"Could not generate {count} categories"
        super().__init__(self.message)
