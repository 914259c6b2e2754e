"""FinFlow: personal income and expense tracking with Gemini insights."""

__version__ = "0.1.0"
