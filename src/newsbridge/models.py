"""Domain models for the news bridge."""

from enum import Enum
from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

ArticleId = Union[str, int]
ChatId = str


class Article(BaseModel):
    """Normalized representation of an article returned by the news API."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: ArticleId
    headline: str
    url: str = ""
    published_date: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("publishedDate", "published_date")
    )
    full_text: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("fullText", "full_text")
    )
    thumbnail_url: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("thumbnailUrl", "thumbnail_url")
    )


class Media(BaseModel):
    """Binary attachment ready to hand to the messaging transport."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    mimetype: str
    filename: Optional[str] = None


class Notification(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    media: Optional[Media] = None


class Reply(BaseModel):
    """Response the command router wants sent back to the origin chat."""

    model_config = ConfigDict(frozen=True)

    text: str
    media: Optional[Media] = None


class IncomingMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    chat_id: ChatId
    body: str


class DeliveryOutcome(BaseModel):
    chat_id: ChatId
    delivered: bool
    error: Optional[str] = None


class TickResult(str, Enum):
    SKIPPED_OVERLAP = "skipped_overlap"
    SKIPPED_NO_SUBSCRIBERS = "skipped_no_subscribers"
    FETCH_FAILED = "fetch_failed"
    NO_NEW_ARTICLE = "no_new_article"
    BASELINE_RECORDED = "baseline_recorded"
    DETAILS_FAILED = "details_failed"
    NOTIFIED = "notified"
