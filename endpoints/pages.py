# endpoints/pages.py
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import ClassVar, Optional, Union


ShortId = Union[bytes, str]


class Vote(enum.Enum):
    UP = "up"
    DOWN = "down"

    @property
    def flag(self) -> int:
        """Value stored in ``votes.vote``."""
        return 1 if self is Vote.UP else 0

    @property
    def sign(self) -> int:
        return 1 if self is Vote.UP else -1


class PageKind(enum.Enum):
    USER = "user"
    FRONTPAGE = "frontpage"
    COMMENTS = "comments"
    RECENT = "recent"
    LOGIN = "login"
    LOGOUT = "logout"
    STORY = "story"
    STORY_VOTE = "story_vote"
    COMMENT_VOTE = "comment_vote"
    SUBMIT = "submit"
    COMMENT = "comment"


# ═════════════════════════  Pages  ═════════════════════════
@dataclass(frozen=True)
class UserPage:
    kind: ClassVar[PageKind] = PageKind.USER
    uid: int

@dataclass(frozen=True)
class Frontpage:
    kind: ClassVar[PageKind] = PageKind.FRONTPAGE

@dataclass(frozen=True)
class Comments:
    kind: ClassVar[PageKind] = PageKind.COMMENTS

@dataclass(frozen=True)
class Recent:
    kind: ClassVar[PageKind] = PageKind.RECENT

@dataclass(frozen=True)
class Login:
    kind: ClassVar[PageKind] = PageKind.LOGIN

@dataclass(frozen=True)
class Logout:
    kind: ClassVar[PageKind] = PageKind.LOGOUT

@dataclass(frozen=True)
class StoryPage:
    kind: ClassVar[PageKind] = PageKind.STORY
    story: ShortId

@dataclass(frozen=True)
class StoryVote:
    kind: ClassVar[PageKind] = PageKind.STORY_VOTE
    story: ShortId
    vote: Vote

@dataclass(frozen=True)
class CommentVote:
    kind: ClassVar[PageKind] = PageKind.COMMENT_VOTE
    comment: ShortId
    vote: Vote

@dataclass(frozen=True)
class Submit:
    kind: ClassVar[PageKind] = PageKind.SUBMIT
    story: ShortId
    title: str

@dataclass(frozen=True)
class CommentPost:
    kind: ClassVar[PageKind] = PageKind.COMMENT
    comment: ShortId
    story: ShortId
    parent: Optional[ShortId] = None


Page = Union[
    UserPage, Frontpage, Comments, Recent, Login, Logout,
    StoryPage, StoryVote, CommentVote, Submit, CommentPost,
]


@dataclass(frozen=True)
class Request:
    """One logical request issued by a workload worker."""

    acting_as: Optional[int]
    page: Page
    is_priming: bool = False

