"""Database models for the comparison API.

Type-safe dataclasses representing database records.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass
class Post:
    """Represents a before/after comparison in the posts table.

    Both image URLs are set at creation and never change. user_id is the owner
    and the only identity allowed to mutate or delete the row.
    """

    id: str
    user_id: str
    before_image_url: str
    after_image_url: str
    caption: Optional[str] = None
    is_favorite: bool = False
    is_shared: bool = False
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Post":
        """Convert database row to Post model."""
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            before_image_url=row["before_image_url"],
            after_image_url=row["after_image_url"],
            caption=row.get("caption"),
            is_favorite=bool(row.get("is_favorite") or False),
            is_shared=bool(row.get("is_shared") or False),
            created_at=row.get("created_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def public_dict(self) -> Dict[str, Any]:
        """Fields shown on the share view (owner identity omitted)."""
        data = self.to_dict()
        data.pop("user_id")
        data.pop("is_favorite")
        return data
