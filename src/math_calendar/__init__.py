"""Daily math trivia calendar."""
__version__ = "0.1.0"
