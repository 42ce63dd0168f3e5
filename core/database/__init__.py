"""
Database module for the site's content store.
"""

from .database import db_manager, get_db_manager, get_db_session, initialize_database, DatabaseManager
from .models import Base, User, ContactMessage, Project, BlogPost, Video, Event, Partner

__all__ = [
    "DatabaseManager",
    "db_manager",
    "get_db_manager",
    "get_db_session",
    "initialize_database",
    "Base",
    "User",
    "ContactMessage",
    "Project",
    "BlogPost",
    "Video",
    "Event",
    "Partner",
]
