"""Models for the response cache."""

import json
from datetime import UTC, datetime
from typing import Any, Optional

from pydantic import BaseModel, NonNegativeInt, model_validator
from typing_extensions import Literal, Self

import constants
from cache.cache_error import CachedResponseParseError
from models.responses import MediaPayload

ResponseKind = Literal["text", "json", "media"]


class CachedResponse(BaseModel):
    """Kind-tagged response payload stored in the cache.

    Text and JSON responses are kept as strings (JSON serialized), media
    responses as content type plus URL.
    """

    kind: ResponseKind
    text: Optional[str] = None
    media: Optional[MediaPayload] = None

    @model_validator(mode="after")
    def check_payload(self) -> Self:
        """Check that the payload matches the declared kind."""
        if self.kind == constants.OUTPUT_KIND_MEDIA:
            if self.media is None or self.text is not None:
                raise ValueError("Media response must carry media payload only")
        elif not self.text or self.media is not None:
            raise ValueError(f"{self.kind} response must carry non-empty text only")
        return self

    @classmethod
    def from_output(cls, kind: ResponseKind, output: Any) -> "CachedResponse":
        """Build cached response from the value returned to the caller."""
        if kind == constants.OUTPUT_KIND_MEDIA:
            return cls(kind=kind, media=MediaPayload.model_validate(output))
        if kind == constants.OUTPUT_KIND_JSON:
            return cls(kind=kind, text=json.dumps(output))
        return cls(kind=kind, text=output)

    def payload(self, expected_kind: ResponseKind) -> Any:
        """Reconstruct the response value.

        Raises:
            CachedResponseParseError: when the stored kind differs from the
                expected one or the stored JSON can not be parsed.
        """
        if self.kind != expected_kind:
            raise CachedResponseParseError(
                f"Cached response of kind '{self.kind}' can not be served "
                f"as '{expected_kind}'"
            )
        if self.kind == constants.OUTPUT_KIND_MEDIA:
            return self.media
        if self.kind == constants.OUTPUT_KIND_JSON:
            try:
                return json.loads(self.text or "")
            except json.JSONDecodeError as e:
                raise CachedResponseParseError(
                    f"Cached JSON response can not be parsed: {e}"
                ) from e
        return self.text

    def as_message_text(self) -> str:
        """Return the text stored in chat history for this response."""
        if self.media is not None:
            return ""
        return self.text or ""


class CacheRecord(BaseModel):
    """Model representing one fingerprint tracked by the response cache.

    Attributes:
        fingerprint: Hash of the query material.
        query: Query material the fingerprint was computed from.
        response_kind: Output kind declared when the record was created.
        threshold: Admission countdown; the response is cached when it
            reaches zero.
        hits: Number of times the cached response was served.
        response: Cached response, set only once admitted.
        expiry: Time after which the cached response is stale.
        last_accessed: Time the record was last read.
        last_used: Time the cached response was last served.
    """

    fingerprint: str
    query: str
    response_kind: ResponseKind = constants.OUTPUT_KIND_TEXT
    threshold: NonNegativeInt
    hits: NonNegativeInt = 0
    response: Optional[CachedResponse] = None
    expiry: Optional[datetime] = None
    created_at: datetime
    last_accessed: Optional[datetime] = None
    last_used: Optional[datetime] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Check whether the record holds a response past its expiry."""
        if self.response is None or self.expiry is None:
            return False
        return (now or datetime.now(UTC)) > self.expiry
