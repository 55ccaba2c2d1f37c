import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from myskin.core.exceptions import MySkinError, NotFoundError
from myskin.core.validation import BlogPostValidator
from myskin.db.base import BlogPost
from myskin.repositories.blog_repository import BlogPostRepository
from myskin.utils.formatting import slugify

logger = logging.getLogger(__name__)

RELATED_POSTS_LIMIT = 3


class BlogService:
    """Blog posts for the public site and the admin editor."""

    def __init__(self, db: Session):
        self.posts = BlogPostRepository(db)

    def list_published(self) -> List[BlogPost]:
        return self.posts.list_published()

    def get_published(self, slug: str) -> Dict[str, Any]:
        """Return ``{"post", "related"}`` for a published post."""
        post = self.posts.get_published_by_slug(slug)
        if post is None:
            raise NotFoundError("Post not found")
        return {"post": post, "related": self.posts.list_related(post.id, RELATED_POSTS_LIMIT)}

    def list_for_admin(self, search: Optional[str] = None) -> List[BlogPost]:
        return self.posts.list_for_admin((search or "").strip() or None)

    def get_post(self, post_id: int) -> BlogPost:
        post = self.posts.get_by_id(post_id)
        if post is None:
            raise NotFoundError("Post not found")
        return post

    def unique_slug(self, source: str, exclude_id: Optional[int] = None) -> str:
        """Slugify ``source`` and append ``-2``, ``-3``... until it is free."""
        base = slugify(source) or "post"
        slug = base
        counter = 2
        while self.posts.slug_exists(slug, exclude_id):
            slug = f"{base}-{counter}"
            counter += 1
        return slug

    def create_post(self, payload: Dict[str, Any]) -> BlogPost:
        data = BlogPostValidator().validate(payload).raise_if_invalid("Invalid blog post")
        data["slug"] = self.unique_slug(data.get("slug") or data["title"])
        data.setdefault("is_published", False)

        post = self.posts.create(BlogPost(**data))
        if post is None:
            raise MySkinError("Failed to create blog post")
        logger.info(
            "Blog post created",
            extra={"context": {"post_id": post.id, "slug": post.slug, "published": post.is_published}},
        )
        return post

    def update_post(self, post_id: int, payload: Dict[str, Any]) -> BlogPost:
        post = self.get_post(post_id)
        data = BlogPostValidator(partial=True).validate(payload).raise_if_invalid("Invalid blog post")
        if "slug" in payload:
            # A cleared slug is rebuilt from the (possibly new) title
            source = data.get("slug") or data.get("title") or post.title
            data["slug"] = self.unique_slug(source, exclude_id=post.id)

        updated = self.posts.update(post_id, data)
        if updated is None:
            raise MySkinError("Failed to update blog post")
        return updated

    def delete_post(self, post_id: int) -> None:
        self.get_post(post_id)
        if not self.posts.delete(post_id):
            raise MySkinError("Failed to delete blog post")
        logger.info("Blog post deleted", extra={"context": {"post_id": post_id}})
