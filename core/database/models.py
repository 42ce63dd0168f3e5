"""
Database models for the site's content collections.
"""
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, Index
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class TimestampMixin:
    """Server-assigned creation and update timestamps (naive UTC)."""
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)


class User(TimestampMixin, Base):
    """Admin portal user."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=True)

    managed_projects = relationship("Project", back_populates="project_manager")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"


class ContactMessage(TimestampMixin, Base):
    """Enquiry submitted through the public contact form."""
    __tablename__ = "contact_messages"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(80), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(40), nullable=True)
    subject = Column(String(120), nullable=False)
    message = Column(Text, nullable=False, default="")
    status = Column(String(40), nullable=True, default="New")  # New, In-Progress, Closed

    def __repr__(self):
        return f"<ContactMessage(id={self.id}, subject='{self.subject}', status='{self.status}')>"


class Project(TimestampMixin, Base):
    """Client project created from an enquiry."""
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    project_name = Column(String(200), nullable=False)
    client_name = Column(String(100), nullable=False)
    client_email = Column(String(255), nullable=True)
    status = Column(String(40), nullable=True, default="Draft Quote")
    project_manager_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    project_manager = relationship("User", back_populates="managed_projects")

    def __repr__(self):
        return f"<Project(id={self.id}, name='{self.project_name}', status='{self.status}')>"


class BlogPost(TimestampMixin, Base):
    """Blog article."""
    __tablename__ = "blog_posts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    slug = Column(String(220), nullable=True, unique=True)
    category = Column(String(100), nullable=True)
    content = Column(Text, nullable=True)
    status = Column(String(40), nullable=True, default="Draft")  # Draft, Published

    __table_args__ = (
        Index('idx_blog_category_status', 'category', 'status'),
    )

    def __repr__(self):
        return f"<BlogPost(id={self.id}, title='{self.title}', status='{self.status}')>"


class Video(TimestampMixin, Base):
    """Embedded video."""
    __tablename__ = "videos"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    category = Column(String(100), nullable=True)
    status = Column(String(40), nullable=True, default="Draft")


class Event(TimestampMixin, Base):
    """Public event listing."""
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    category = Column(String(100), nullable=True)
    status = Column(String(40), nullable=True, default="Draft")  # Draft, Published, Cancelled, Completed
    start_date = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<Event(id={self.id}, title='{self.title}', status='{self.status}')>"


class Partner(TimestampMixin, Base):
    """Partner organisation shown on the site."""
    __tablename__ = "partners"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    status = Column(String(20), nullable=True, default="Active")  # Active, Inactive
