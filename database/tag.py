from sqlalchemy import Column, Integer, String, Boolean, Float, UniqueConstraint
from database.database import Base


class Tag(Base):
    __tablename__ = "tags"

    id          = Column(Integer, primary_key=True)
    tag         = Column(String(25), unique=True, nullable=False)
    description = Column(String(100), nullable=True)
    privileged  = Column(Boolean, default=False, nullable=False)
    is_media    = Column(Boolean, default=False, nullable=False)
    inactive    = Column(Boolean, default=False, nullable=False)
    hotness_mod = Column(Float, default=0.0, nullable=True)


class Tagging(Base):
    __tablename__ = "taggings"

    id       = Column(Integer, primary_key=True)
    story_id = Column(Integer, nullable=False)
    tag_id   = Column(Integer, nullable=False)

    __table_args__ = (UniqueConstraint("story_id", "tag_id"),)


class TagFilter(Base):
    __tablename__ = "tag_filters"

    id      = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False)
    tag_id  = Column(Integer, nullable=False)


class SuggestedTagging(Base):
    __tablename__ = "suggested_taggings"

    id       = Column(Integer, primary_key=True)
    story_id = Column(Integer, nullable=False)
    tag_id   = Column(Integer, nullable=False)
    user_id  = Column(Integer, nullable=False)
