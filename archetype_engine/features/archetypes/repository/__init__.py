"""
Persistence for profile classification fields and archetype achievements.
"""

from .achievement_repository import AchievementRepository
from .profile_repository import ProfileRepository

__all__ = ["AchievementRepository", "ProfileRepository"]
