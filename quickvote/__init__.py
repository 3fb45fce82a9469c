"""QuickVote: ad-hoc voting sessions with live results."""

__version__ = "1.0.0"
