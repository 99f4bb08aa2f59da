"""Editing session orchestration"""
from .manga_session import MangaSession

__all__ = ["MangaSession"]
