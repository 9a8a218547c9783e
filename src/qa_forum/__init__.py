"""Q&A Forum - community questions, answers, voting and karma."""

__version__ = "0.1.0"
