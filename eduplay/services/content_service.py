"""
Content Resolution Service

Resolves the content rows shown for a (class, subject) pair and the single
content page with its chapter sidebar.
"""
import logging
from typing import Dict, List, Optional, Union

from eduplay import messages
from eduplay.db.db_interface import DatabaseProvider, StoreError
from eduplay.models.schemas import (
    Chapter,
    ChapterGroup,
    Content,
    ContentDetail,
    ContentListResult,
    ResultState,
    parse_row,
    parse_rows,
)
from eduplay.services.taxonomy import normalize_class, normalize_subject

logger = logging.getLogger(__name__)

LIST_COLUMNS = "id, title, class, subject"
SIDEBAR_COLUMNS = "id, title, subject, class, pages, chapter_id, created_at"
NO_CHAPTER_ID = "no-chapter"
NO_CHAPTER_NAME = "Uncategorized"


def _matches(content: Content, class_name: Optional[str], subject: Optional[str]) -> bool:
    if class_name and content.class_name != class_name:
        return False
    if subject and content.subject != subject:
        return False
    return True


def resolve_content_list(
    store: DatabaseProvider,
    class_name: Optional[str] = None,
    subject: Optional[str] = None,
    raw_post_filter: bool = True,
) -> ContentListResult:
    """
    Resolve the content list for a class/subject pair.

    The store is queried with the normalized values, then the rows are
    filtered again on the caller's raw values (or on the normalized ones when
    ``raw_post_filter`` is off), so rows of another class or subject never
    reach the result even when store-side filtering is imprecise.

    Returns:
        ContentListResult in state LOADED, EMPTY (query succeeded, nothing
        matched) or FAILED (the store call failed; no stale data is used).
    """
    normalized_class = normalize_class(class_name)
    normalized_subject = normalize_subject(subject)

    filters = {}
    if normalized_class:
        filters["class"] = normalized_class
    if normalized_subject:
        filters["subject"] = normalized_subject

    try:
        rows = store.select("contents", columns=LIST_COLUMNS, filters=filters or None)
        contents = parse_rows(Content, rows)
    except StoreError as e:
        logger.error(f"Error loading contents for class={class_name!r} subject={subject!r}: {e}")
        return ContentListResult(state=ResultState.FAILED, message=messages.LOAD_FAILED)

    if raw_post_filter:
        matched = [c for c in contents if _matches(c, class_name, subject)]
    else:
        matched = [c for c in contents if _matches(c, normalized_class, normalized_subject)]

    logger.debug(f"Store returned {len(contents)} contents, {len(matched)} after post-filter (filters={filters})")

    if not matched:
        return ContentListResult(state=ResultState.EMPTY, message=messages.NO_CONTENT_FOUND)
    return ContentListResult(state=ResultState.LOADED, items=matched)


def get_content(store: DatabaseProvider, content_id: Union[int, str]) -> Optional[Content]:
    """Load one content row; None when it does not exist."""
    row = store.select_one("contents", {"id": content_id})
    if row is None:
        return None
    return parse_row(Content, row)


def filter_sidebar_contents(
    contents: List[Content], subject: Optional[str] = None, class_name: Optional[str] = None
) -> List[Content]:
    """Keep only the contents of the selected subject and/or class."""
    return [c for c in contents if _matches(c, class_name, subject)]


def group_by_chapter(contents: List[Content], chapter_names: Dict[int, str]) -> List[ChapterGroup]:
    """Group contents by chapter, keeping the order in which chapters first appear."""
    groups: Dict[str, ChapterGroup] = {}
    for content in contents:
        if content.chapter_id is None:
            group_id, name = NO_CHAPTER_ID, NO_CHAPTER_NAME
        else:
            group_id = str(content.chapter_id)
            name = content.chapter_name or chapter_names.get(content.chapter_id, NO_CHAPTER_NAME)
        if group_id not in groups:
            groups[group_id] = ChapterGroup(id=group_id, name=name)
        groups[group_id].contents.append(content)
    return list(groups.values())


def content_sidebar(
    store: DatabaseProvider, subject: Optional[str] = None, class_name: Optional[str] = None
) -> List[ChapterGroup]:
    """All contents of the selected subject/class, newest first, grouped by chapter."""
    rows = store.select("contents", columns=SIDEBAR_COLUMNS, order_by="created_at", desc=True)
    contents = filter_sidebar_contents(parse_rows(Content, rows), subject=subject, class_name=class_name)

    chapter_ids = sorted({c.chapter_id for c in contents if c.chapter_id is not None})
    chapter_names = {}
    if chapter_ids:
        chapters = parse_rows(Chapter, store.select("chapters", in_filters={"id": chapter_ids}))
        chapter_names = {chapter.id: chapter.name for chapter in chapters}

    return group_by_chapter(contents, chapter_names)


def content_detail(
    store: DatabaseProvider,
    content_id: Union[int, str],
    subject: Optional[str] = None,
    class_name: Optional[str] = None,
) -> Optional[ContentDetail]:
    """The content page: the selected content, its first page and the chapter sidebar."""
    content = get_content(store, content_id)
    if content is None:
        return None
    page = content.pages[0] if content.pages else None
    return ContentDetail(
        content=content,
        page=page,
        chapters=content_sidebar(store, subject=subject, class_name=class_name),
    )
