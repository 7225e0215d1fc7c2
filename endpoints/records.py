# endpoints/records.py
"""Trace records, one JSON object per line.

    {"user": 3, "page": "story_vote", "story": "abc12", "vote": "up", "priming": false}
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, StrictBool, StrictInt, StrictStr, ValidationError, model_validator

from endpoints.pages import (
    CommentPost, Comments, CommentVote, Frontpage, Login, Logout, Page, PageKind,
    Recent, Request, StoryPage, StoryVote, Submit, UserPage, Vote,
)
from errors import ConfigurationError

# fields a record must carry for its page kind
REQUIRED = {
    PageKind.USER:         ("uid",),
    PageKind.STORY:        ("story",),
    PageKind.STORY_VOTE:   ("story", "vote"),
    PageKind.COMMENT_VOTE: ("comment", "vote"),
    PageKind.SUBMIT:       ("story",),
    PageKind.COMMENT:      ("comment", "story"),
}


class TraceRecord(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    page: PageKind
    user: Optional[StrictInt] = None
    priming: StrictBool = False

    # ids and flags are taken as written, "1" is not a user id
    uid: Optional[StrictInt] = None
    story: Optional[StrictStr] = None
    comment: Optional[StrictStr] = None
    parent: Optional[StrictStr] = None
    title: StrictStr = ""
    vote: Optional[Vote] = None

    @model_validator(mode="after")
    def check_page_fields(self) -> "TraceRecord":
        missing = [f for f in REQUIRED.get(self.page, ()) if getattr(self, f) is None]
        if missing:
            raise ValueError(f"/{self.page.value} needs {', '.join(missing)}")
        return self

    def to_page(self) -> Page:
        kind = self.page
        if kind is PageKind.USER:
            return UserPage(self.uid)
        if kind is PageKind.STORY:
            return StoryPage(self.story)
        if kind is PageKind.STORY_VOTE:
            return StoryVote(self.story, self.vote)
        if kind is PageKind.COMMENT_VOTE:
            return CommentVote(self.comment, self.vote)
        if kind is PageKind.SUBMIT:
            return Submit(self.story, self.title)
        if kind is PageKind.COMMENT:
            return CommentPost(self.comment, self.story, self.parent)
        return {
            PageKind.FRONTPAGE: Frontpage,
            PageKind.COMMENTS:  Comments,
            PageKind.RECENT:    Recent,
            PageKind.LOGIN:     Login,
            PageKind.LOGOUT:    Logout,
        }[kind]()

    def to_request(self) -> Request:
        return Request(acting_as=self.user, page=self.to_page(), is_priming=self.priming)


def request_from_record(data: Any) -> Request:
    """Validate one decoded trace line and turn it into a request."""
    try:
        record = TraceRecord.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"bad trace record {data!r}: {e}") from e
    return record.to_request()
