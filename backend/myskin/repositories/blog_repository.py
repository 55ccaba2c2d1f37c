from typing import List, Optional

from sqlalchemy import or_

from myskin.db.base import BlogPost
from myskin.repositories.base_repository import BaseRepository, like_pattern


class BlogPostRepository(BaseRepository[BlogPost]):
    model = BlogPost

    def list_published(self) -> List[BlogPost]:
        return (
            self.db.query(BlogPost)
            .filter(BlogPost.is_published.is_(True))
            .order_by(BlogPost.created_at.desc(), BlogPost.id.desc())
            .all()
        )

    def list_for_admin(self, search: Optional[str] = None) -> List[BlogPost]:
        query = self.db.query(BlogPost)
        if search:
            pattern = like_pattern(search)
            query = query.filter(
                or_(
                    BlogPost.title.ilike(pattern, escape="\\"),
                    BlogPost.excerpt.ilike(pattern, escape="\\"),
                )
            )
        return query.order_by(BlogPost.created_at.desc(), BlogPost.id.desc()).all()

    def get_published_by_slug(self, slug: str) -> Optional[BlogPost]:
        return (
            self.db.query(BlogPost)
            .filter(BlogPost.slug == slug, BlogPost.is_published.is_(True))
            .first()
        )

    def list_related(self, exclude_id: int, limit: int = 3) -> List[BlogPost]:
        return (
            self.db.query(BlogPost)
            .filter(BlogPost.is_published.is_(True), BlogPost.id != exclude_id)
            .order_by(BlogPost.created_at.desc(), BlogPost.id.desc())
            .limit(limit)
            .all()
        )

    def slug_exists(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        query = self.db.query(BlogPost.id).filter(BlogPost.slug == slug)
        if exclude_id is not None:
            query = query.filter(BlogPost.id != exclude_id)
        return query.first() is not None

    def recent(self, limit: int = 5) -> List[BlogPost]:
        return (
            self.db.query(BlogPost)
            .order_by(BlogPost.created_at.desc(), BlogPost.id.desc())
            .limit(limit)
            .all()
        )
