"""In-memory stand-ins for Supabase plus token and image helpers."""

import time
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import jwt

from compare_api.core.errors import UpstreamFailure
from compare_api.core.validation import ImageFile
from compare_api.infrastructure.database.models import Post

JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"
SUPABASE_URL = "https://test.supabase.co"

ALICE = "11111111-1111-4111-8111-111111111111"
BOB = "22222222-2222-4222-8222-222222222222"


def make_token(user_id: str, expires_in: int = 3600, audience: str = "authenticated") -> str:
    payload = {"sub": user_id, "aud": audience, "exp": int(time.time()) + expires_in}
    return jwt.encode(payload, JWT_SECRET, algorithm="HS256")


def auth_headers(user_id: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


def jpeg(size: int = 2048, name: str = "photo.jpg") -> ImageFile:
    return ImageFile(filename=name, content_type="image/jpeg", data=b"\xff\xd8" + b"0" * (size - 2))


class FakeClock:
    """Manually advanced clock in epoch seconds."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeBucket:
    """Stands in for the supabase storage file API of one bucket."""

    def __init__(self, bucket: str = "images"):
        self.bucket = bucket
        self.objects: Dict[str, bytes] = {}
        self.fail_upload_on: Optional[str] = None
        self.fail_remove = False
        self.removed: List[List[str]] = []

    def upload(self, path: str, file: bytes, file_options: Optional[dict] = None):
        if self.fail_upload_on and self.fail_upload_on in path:
            raise RuntimeError("The object exceeded the maximum allowed size")
        self.objects[path] = file
        return SimpleNamespace(path=path)

    def get_public_url(self, path: str) -> str:
        return f"{SUPABASE_URL}/storage/v1/object/public/{self.bucket}/{path}"

    def remove(self, paths: List[str]):
        self.removed.append(list(paths))
        if self.fail_remove:
            raise RuntimeError("storage unavailable")
        for path in paths:
            self.objects.pop(path, None)
        return []


class FakeSupabase:
    """Duck-typed SupabaseClient exposing table() and bucket()."""

    def __init__(self, bucket: Optional[FakeBucket] = None, tables: Optional[Dict[str, Any]] = None):
        self._bucket = bucket or FakeBucket()
        self._tables = tables or {}

    def table(self, name: str):
        return self._tables[name]

    def bucket(self, name: str):
        return self._bucket


class FakePostRepository:
    """In-memory posts table with the PostRepository interface."""

    def __init__(self):
        self.rows: Dict[str, Post] = {}
        self.fail_on: set = set()
        self.updates: List[Dict[str, Any]] = []
        self._created = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise UpstreamFailure(operation.replace("_", " "), f"{operation}: connection reset by peer")

    def add(self, user_id: str, **fields) -> Post:
        self._created += timedelta(minutes=1)
        post_id = fields.pop("id", str(uuid.uuid4()))
        post = Post(
            id=post_id,
            user_id=user_id,
            before_image_url=fields.pop(
                "before_image_url",
                f"{SUPABASE_URL}/storage/v1/object/public/images/{user_id}/before-1-a.jpg",
            ),
            after_image_url=fields.pop(
                "after_image_url",
                f"{SUPABASE_URL}/storage/v1/object/public/images/{user_id}/after-1-b.jpg",
            ),
            created_at=self._created.isoformat(),
            **fields,
        )
        self.rows[post.id] = post
        return post

    def list_for_owner(self, user_id: str) -> List[Post]:
        self._maybe_fail("fetch_posts")
        owned = [post for post in self.rows.values() if post.user_id == user_id]
        return sorted(owned, key=lambda post: post.created_at, reverse=True)

    def get_owned(self, post_id: str, user_id: str) -> Optional[Post]:
        self._maybe_fail("fetch_post")
        post = self.rows.get(post_id)
        return post if post and post.user_id == user_id else None

    def get_by_id(self, post_id: str) -> Optional[Post]:
        self._maybe_fail("fetch_post")
        return self.rows.get(post_id)

    def create(self, user_id, before_image_url, after_image_url, caption=None) -> Post:
        self._maybe_fail("create_post")
        return self.add(
            user_id,
            before_image_url=before_image_url,
            after_image_url=after_image_url,
            caption=caption,
        )

    def update_flags(self, post_id: str, user_id: str, fields: Dict[str, Any]) -> None:
        self._maybe_fail("update_post")
        self.updates.append(dict(fields))
        post = self.rows.get(post_id)
        if post and post.user_id == user_id:
            for key, value in fields.items():
                setattr(post, key, value)

    def delete_owned(self, post_id: str, user_id: str) -> None:
        self._maybe_fail("delete_post")
        post = self.rows.get(post_id)
        if post and post.user_id == user_id:
            del self.rows[post_id]


class FakeQuery:
    """Chainable PostgREST query builder recording the calls made on it."""

    def __init__(self, data: Optional[List[Dict[str, Any]]] = None, error: Optional[Exception] = None):
        self.data = data or []
        self.error = error
        self.calls: List[tuple] = []

    def __getattr__(self, name: str):
        if name not in {"select", "eq", "order", "limit", "insert", "update", "delete"}:
            raise AttributeError(name)

        def record(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self

        return record

    def execute(self):
        if self.error is not None:
            raise self.error
        return SimpleNamespace(data=self.data)
