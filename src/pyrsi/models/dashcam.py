"""Dashcam (AVL) listing returned by the archive JSON API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pyrsi.ingestion.normalize import safe_str


class DashcamImage(BaseModel):
    """One dashcam image entry.

    Only ``imgurl`` is relied upon; the rest of the entry is kept verbatim
    because it is forwarded untouched to the prediction backend.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    imgurl: str

    @field_validator("imgurl", mode="before")
    @classmethod
    def _require_url(cls, value: Any) -> str:
        text = safe_str(value)
        if text is None:
            raise ValueError("imgurl must be non-empty")
        return text

    @property
    def image_key(self) -> str:
        """Basename of the image URL without the ``.jpg`` extension."""
        return self.imgurl.rsplit("/", 1)[-1].replace(".jpg", "")

    def payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class DashcamListing(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    data: list[DashcamImage] = Field(default_factory=list)

    @field_validator("data", mode="before")
    @classmethod
    def _default_list(cls, value: Any) -> Any:
        return [] if value is None else value
