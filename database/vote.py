from sqlalchemy import Column, Integer, SmallInteger, String, ForeignKey
from database.database import Base

class Vote(Base):
    __tablename__ = "votes"

    id         = Column(Integer, primary_key=True)
    user_id    = Column(Integer, ForeignKey("users.id"), nullable=False)
    story_id   = Column(Integer, ForeignKey("stories.id"), nullable=False)
    comment_id = Column(Integer, nullable=True)
    vote       = Column(SmallInteger, nullable=False)    # 1 = up, 0 = down
    reason     = Column(String(1), nullable=True)

    # no unique (user, story, comment) constraint: double votes are part of the workload
