"""
Board Core - the framework-independent part of the Jeopardy board game.

This package provides the board data model, the clue reveal state machine and the
board building workflow. The Django app plugs in the concrete trivia data source,
the session storage and the renderers.
"""

__version__ = "0.1.0"
__author__ = "Nils Brinkmann"
