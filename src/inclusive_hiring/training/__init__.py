"""Skill training courses."""

from .courses import SkillCourseCatalog

__all__ = ["SkillCourseCatalog"]
