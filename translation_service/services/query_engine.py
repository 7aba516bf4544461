"""
Query Engine - composes translation filters into one read query.
"""

import logging
import math
import time
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from translation_service.constants import DEFAULT_PER_PAGE, MAX_PER_PAGE
from translation_service.exceptions import StorageException
from translation_service.metrics import track_db_query
from translation_service.models.tag import Tag
from translation_service.models.translation import Translation
from translation_service.utils import parse_bool, parse_int, split_tag_names

logger = logging.getLogger("main")

LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    return value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2).replace("%", LIKE_ESCAPE + "%").replace("_", LIKE_ESCAPE + "_")


@dataclass
class TranslationFilter:
    """Everything the list endpoint can filter or page by."""

    locale: Optional[str] = None
    namespace: Optional[str] = None
    search: Optional[str] = None
    tags: Optional[List[str]] = None
    active_only: bool = True
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE

    def __post_init__(self):
        self.page = max(1, self.page)
        self.per_page = min(max(1, self.per_page), MAX_PER_PAGE)

    @classmethod
    def from_args(cls, args, default_per_page=DEFAULT_PER_PAGE, max_per_page=MAX_PER_PAGE):
        """
        Build a filter from request query args.

        `tags` is read from `tags=a,b` or `tags[]=a&tags[]=b`; a tag parameter
        with no usable names means no tag filter. `per_page` is clamped to
        [1, max_per_page]. `active_only` defaults to true when absent; a value
        that is not a recognised boolean reads as false.
        """
        tag_values = args.getlist("tags") + args.getlist("tags[]")
        tags = split_tag_names(tag_values) or None

        per_page = parse_int(args.get("per_page"), default_per_page)
        per_page = min(max(1, per_page), max_per_page)
        active_only = args.get("active_only")

        return cls(
            locale=args.get("locale") or None,
            namespace=args.get("namespace") or None,
            search=args.get("search") or None,
            tags=tags,
            active_only=True if active_only is None else parse_bool(active_only, default=False),
            page=parse_int(args.get("page"), 1),
            per_page=per_page,
        )


@dataclass
class TranslationPage:
    items: List[Translation] = field(default_factory=list)
    total: int = 0
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE

    @property
    def last_page(self):
        return max(1, math.ceil(self.total / self.per_page))


def build_translation_query(filters: TranslationFilter):
    """
    SELECT for the rows matching `filters`.

    Clauses are always applied in the same order: locale, namespace, search,
    tags, active flag. Tag names are OR-ed, every other predicate is AND-ed.
    """
    query = select(Translation)

    if filters.locale is not None:
        query = query.where(Translation.locale == filters.locale)

    if filters.namespace is not None:
        query = query.where(Translation.namespace == filters.namespace)

    if filters.search:
        pattern = f"%{escape_like(filters.search)}%"
        query = query.where(
            or_(
                Translation.key.ilike(pattern, escape=LIKE_ESCAPE),
                Translation.content.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )

    if filters.tags:
        query = query.where(Translation.tags.any(Tag.name.in_(filters.tags)))

    if filters.active_only:
        query = query.where(Translation.is_active.is_(True))

    return query


class QueryEngine:
    """Read side of the store: paginated listing and export slices"""

    def __init__(self, session):
        self.session = session

    @track_db_query("paginate")
    def paginate(self, filters: TranslationFilter) -> TranslationPage:
        query = build_translation_query(filters)
        count_query = select(func.count()).select_from(query.order_by(None).subquery())
        page_query = (
            query.options(selectinload(Translation.tags))
            .order_by(Translation.id)
            .limit(filters.per_page)
            .offset((filters.page - 1) * filters.per_page)
        )

        start = time.time()
        try:
            total = self.session.scalar(count_query)
            items = self.session.scalars(page_query).all() if total else []
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageException(f"Failed to list translations: {e}") from e

        duration = (time.time() - start) * 1000.0
        logger.debug(
            f"QueryEngine.paginate: filters={filters} total={total} duration_ms={duration:.1f}"
        )
        return TranslationPage(items=items, total=total, page=filters.page, per_page=filters.per_page)

    @track_db_query("export")
    def export_slice(self, locale, namespace, tags=None):
        """
        key -> content for active rows in (locale, namespace), optionally
        restricted to rows holding any of `tags`. Ordered by key.
        """
        filters = TranslationFilter(locale=locale, namespace=namespace, tags=tags or None, active_only=True)
        query = (
            build_translation_query(filters)
            .with_only_columns(Translation.key, Translation.content)
            .order_by(Translation.key)
        )

        start = time.time()
        try:
            rows = self.session.execute(query).all()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageException(f"Failed to export translations: {e}") from e

        duration = (time.time() - start) * 1000.0
        logger.info(
            f"QueryEngine.export_slice: locale={locale} namespace={namespace} tags={tags or []} "
            f"rows={len(rows)} duration_ms={duration:.1f}"
        )
        return {row.key: row.content for row in rows}
