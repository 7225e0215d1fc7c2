# database/story.py
from sqlalchemy import (
    Column, Integer, String, Text, Boolean, DateTime, Float, ForeignKey, UniqueConstraint,
)
from sqlalchemy.sql import func
from database.database import Base


class Story(Base):
    __tablename__ = "stories"

    id              = Column(Integer, primary_key=True)
    created_at      = Column(DateTime, server_default=func.now())
    user_id         = Column(Integer, ForeignKey("users.id"), nullable=False)
    url             = Column(String(250), nullable=True)
    title           = Column(String(150), nullable=False, default="")
    description     = Column(Text)
    short_id        = Column(String(6), unique=True, nullable=False)
    is_expired      = Column(Boolean, default=False, nullable=False)
    is_moderated    = Column(Boolean, default=False, nullable=False)
    upvotes         = Column(Integer, default=0, nullable=False)
    downvotes       = Column(Integer, default=0, nullable=False)
    hotness         = Column(Float, default=0.0, nullable=False)   # lower = hotter
    markeddown_description = Column(Text)
    comments_count  = Column(Integer, default=0, nullable=False)
    merged_story_id = Column(Integer, nullable=True)


class SuggestedTitle(Base):
    __tablename__ = "suggested_titles"

    id       = Column(Integer, primary_key=True)
    story_id = Column(Integer, nullable=False)
    user_id  = Column(Integer, nullable=False)
    title    = Column(String(150), nullable=False, default="")


class ReadRibbon(Base):
    """Last time a user looked at a story (one row per user and story)."""

    __tablename__ = "read_ribbons"

    id           = Column(Integer, primary_key=True)
    is_following = Column(Boolean, default=True, nullable=False)
    created_at   = Column(DateTime, nullable=False)
    updated_at   = Column(DateTime, nullable=False)
    user_id      = Column(Integer, nullable=False)
    story_id     = Column(Integer, nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "story_id"),)


class HiddenStory(Base):
    __tablename__ = "hidden_stories"

    id       = Column(Integer, primary_key=True)
    user_id  = Column(Integer, nullable=False)
    story_id = Column(Integer, nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "story_id"),)


class SavedStory(Base):
    __tablename__ = "saved_stories"

    id         = Column(Integer, primary_key=True)
    created_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, nullable=True)
    user_id    = Column(Integer, nullable=False)
    story_id   = Column(Integer, nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "story_id"),)
