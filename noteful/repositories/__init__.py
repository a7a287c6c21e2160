# Repositories package init
"""
Noteful Backend — Repository Layer
====================================

One repository per entity. All are stateless singletons that receive the
request's AsyncSession on every call:

    - folder_repository: Folder CRUD, clears note.folder_id on delete
    - tag_repository:    Tag CRUD, pulls the tag from notes on delete
    - note_repository:   Note CRUD with folder/tag reference validation
    - user_repository:   Registration and login lookups (not user-scoped)
"""

from noteful.repositories.folder_repository import FolderRepository, folder_repository
from noteful.repositories.note_repository import NoteRepository, note_repository
from noteful.repositories.tag_repository import TagRepository, tag_repository
from noteful.repositories.user_repository import UserRepository, user_repository

__all__ = [
    "FolderRepository",
    "NoteRepository",
    "TagRepository",
    "UserRepository",
    "folder_repository",
    "note_repository",
    "tag_repository",
    "user_repository",
]
