"""
SQLAlchemy models. Import here so create_all and the app can use them.
"""
from gradestats.models.user import User
from gradestats.models.analysis import Analysis

__all__ = ["User", "Analysis"]
