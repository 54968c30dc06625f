"""
Jeopardy-style trivia match engine.
"""

__version__ = "0.1.0"
