# Models package init
"""
Importing this package registers every table on Base.metadata
(Alembic's env.py and Database.create_all() rely on that).
"""

from noteful.models.folder import Folder
from noteful.models.note import Note, note_tags
from noteful.models.tag import Tag
from noteful.models.user import User

__all__ = ["Folder", "Note", "Tag", "User", "note_tags"]
