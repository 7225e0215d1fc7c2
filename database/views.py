# database/views.py
"""Read-only relations the notification step queries.

They are views in the packaged DDL (``schema/*.sql``). They are declared as
plain tables here so queries can be built against them and so test databases
created from the metadata have something to read.
"""
from sqlalchemy import Table, Column, Integer, DateTime

from database.database import Base

# original schema
replying_comments_for_count = Table(
    "replying_comments_for_count", Base.metadata,
    Column("user_id", Integer, nullable=False),
    Column("comment_id", Integer, nullable=False),
    Column("story_id", Integer, nullable=False),
    Column("created_at", DateTime),
)

# noria schema: unread reply counts, precomputed per user
boundary_notifications = Table(
    "BOUNDARY_notifications", Base.metadata,
    Column("user_id", Integer, nullable=False),
    Column("notifications", Integer, nullable=False),
)
