from .moods import MoodStore
from .storage import JournalStorage

__all__ = ["JournalStorage", "MoodStore"]
