"""
Admin Service
Content management for the admin console: grades, subjects, chapters and contents.
"""
import logging
from typing import Any, Dict, List, Optional, Union

from eduplay.db.db_interface import DatabaseProvider
from eduplay.models.schemas import Chapter, Content, ContentForm, Grade, Subject, parse_row, parse_rows
from eduplay.services.cascade_delete import AdminState
from eduplay.services.taxonomy import class_key_for_grade, grade_name_for_class

logger = logging.getLogger(__name__)


class AdminService:
    """CRUD operations behind the admin console."""

    def __init__(self, store: DatabaseProvider):
        self.store = store

    @staticmethod
    def _clean_name(name: str) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValueError("Name must not be empty")
        return cleaned

    # -- listing -----------------------------------------------------------

    def load_state(self) -> AdminState:
        """Everything the console shows: grades by name, contents newest first."""
        return AdminState(
            grades=parse_rows(Grade, self.store.select("grades", order_by="name")),
            subjects=parse_rows(Subject, self.store.select("subjects")),
            chapters=parse_rows(Chapter, self.store.select("chapters")),
            contents=parse_rows(Content, self.store.select("contents", order_by="created_at", desc=True)),
        )

    @staticmethod
    def tree(state: AdminState) -> List[Dict[str, Any]]:
        """Nest the snapshot as grade -> subjects -> chapters -> contents."""
        result = []
        for grade in state.grades:
            subjects = []
            for subject in (s for s in state.subjects if s.grade_id == grade.id):
                chapters = [
                    {
                        **chapter.model_dump(),
                        "contents": [
                            c.model_dump(by_alias=True, mode="json")
                            for c in state.contents if c.chapter_id == chapter.id
                        ],
                    }
                    for chapter in state.chapters
                    if chapter.grade_id == grade.id and chapter.subject_id == subject.id
                ]
                subjects.append({**subject.model_dump(), "chapters": chapters})
            result.append({**grade.model_dump(), "subjects": subjects})
        return result

    # -- taxonomy rows -----------------------------------------------------

    def add_grade(self, name: str) -> Grade:
        name = self._clean_name(name)
        row = self.store.insert("grades", {"name": name})
        logger.info(f"Added grade {name!r}")
        return parse_row(Grade, row)

    def add_subject(self, name: str, grade_id: int) -> Subject:
        name = self._clean_name(name)
        row = self.store.insert("subjects", {"name": name, "grade_id": grade_id})
        logger.info(f"Added subject {name!r} to grade {grade_id}")
        return parse_row(Subject, row)

    def add_chapter(self, name: str, grade_id: int, subject_id: int) -> Chapter:
        name = self._clean_name(name)
        if self.store.select_one("subjects", {"id": subject_id, "grade_id": grade_id}) is None:
            raise ValueError(f"Subject {subject_id} does not belong to grade {grade_id}")
        row = self.store.insert("chapters", {"name": name, "grade_id": grade_id, "subject_id": subject_id})
        logger.info(f"Added chapter {name!r} to subject {subject_id}")
        return parse_row(Chapter, row)

    # -- contents ----------------------------------------------------------

    def _content_values(self, form: ContentForm) -> Dict[str, Any]:
        """Row values for a content form; grade, subject and chapter must agree."""
        grade_row = self.store.select_one("grades", {"id": form.grade_id})
        if grade_row is None:
            raise ValueError(f"Unknown grade {form.grade_id}")
        subject_row = self.store.select_one("subjects", {"id": form.subject_id, "grade_id": form.grade_id})
        if subject_row is None:
            raise ValueError(f"Subject {form.subject_id} does not belong to grade {form.grade_id}")
        chapter_row = self.store.select_one(
            "chapters", {"id": form.chapter_id, "grade_id": form.grade_id, "subject_id": form.subject_id}
        )
        if chapter_row is None:
            raise ValueError(f"Chapter {form.chapter_id} does not belong to subject {form.subject_id}")

        page = {
            "title": form.title,
            "description": form.description,
            "content_type": form.content_type,
            "youtube_link": form.youtube_link,
            "file_url": form.file_url,
        }
        return {
            "class": class_key_for_grade(grade_row["name"]),
            "subject": subject_row["name"].lower(),
            "chapter_id": form.chapter_id,
            "pages": [page],
            **page,
        }

    def add_content(self, form: ContentForm) -> Content:
        row = self.store.insert("contents", self._content_values(form))
        logger.info(f"Added content {form.title!r} to chapter {form.chapter_id}")
        return parse_row(Content, row)

    def update_content(self, content_id: Union[int, str], form: ContentForm) -> Content:
        rows = self.store.update("contents", self._content_values(form), {"id": content_id})
        if not rows:
            raise LookupError(f"Content {content_id} not found")
        logger.info(f"Updated content {content_id}")
        return parse_row(Content, rows[0])

    def delete_content(self, content_id: Union[int, str]) -> None:
        self.store.delete("contents", filters={"id": content_id})
        logger.info(f"Deleted content {content_id}")

    def edit_form_for(self, content_id: Union[int, str], state: Optional[AdminState] = None) -> Dict[str, Any]:
        """
        Form defaults for editing an existing content row.

        The row only stores the class key and subject name, so the grade and
        subject ids are recovered by name; an unmatched class falls back to
        the first grade.
        """
        row = self.store.select_one("contents", {"id": content_id})
        if row is None:
            raise LookupError(f"Content {content_id} not found")
        content = parse_row(Content, row)
        state = state or self.load_state()

        grade_name = grade_name_for_class(content.class_name) if content.class_name else ""
        grade = next((g for g in state.grades if g.name.lower() == grade_name.lower()), None)
        if grade is None and state.grades:
            grade = state.grades[0]
        subject = next(
            (
                s for s in state.subjects
                if content.subject and s.name.lower() == content.subject.lower()
                and grade is not None and s.grade_id == grade.id
            ),
            None,
        )
        chapter = next((c for c in state.chapters if c.id == content.chapter_id), None)

        return {
            "grade_id": grade.id if grade else None,
            "subject_id": subject.id if subject else None,
            "chapter_id": chapter.id if chapter else None,
            "title": content.title,
            "description": content.description,
            "content_type": content.content_type,
            "youtube_link": content.youtube_link or "",
            "file_url": content.file_url or "",
        }
