# database/comment.py
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Float, ForeignKey
from database.database import Base

class Comment(Base):
    __tablename__ = "comments"

    id                = Column(Integer, primary_key=True)
    created_at        = Column(DateTime, nullable=False)
    updated_at        = Column(DateTime, nullable=True)
    short_id          = Column(String(10), unique=True, nullable=False)
    story_id          = Column(Integer, ForeignKey("stories.id"), nullable=False)
    user_id           = Column(Integer, ForeignKey("users.id"), nullable=False)
    parent_comment_id = Column(Integer, nullable=True)             # None = top level
    thread_id         = Column(Integer, nullable=True)
    comment           = Column(Text, nullable=False)
    upvotes           = Column(Integer, default=0, nullable=False)
    downvotes         = Column(Integer, default=0, nullable=False)
    confidence        = Column(Float, default=0.0, nullable=False)
    markeddown_comment = Column(Text)
    is_deleted        = Column(Boolean, default=False, nullable=False)
    is_moderated      = Column(Boolean, default=False, nullable=False)
