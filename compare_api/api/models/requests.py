"""Request models for the comparison API."""

from typing import Optional

from pydantic import BaseModel, Field


class PostUpdateRequest(BaseModel):
    """Body of PATCH /posts.

    Accepts both snake_case and camelCase keys. Fields left out are not
    written; at least one of is_favorite / is_shared must be present.
    """

    post_id: Optional[str] = Field(None, alias="postId")
    is_favorite: Optional[bool] = Field(None, alias="isFavorite")
    is_shared: Optional[bool] = Field(None, alias="isShared")

    class Config:
        populate_by_name = True

    def update_fields(self) -> dict:
        return {"is_favorite": self.is_favorite, "is_shared": self.is_shared}
