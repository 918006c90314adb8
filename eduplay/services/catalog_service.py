"""
Catalog Service
Grade listing and subject lookup for the class-selection pages.
"""
import logging
from typing import Any, Dict, List, Optional

from eduplay import messages
from eduplay.db.db_interface import DatabaseProvider, StoreError
from eduplay.models.schemas import (
    Grade,
    Profile,
    ResultState,
    Subject,
    SubjectCard,
    SubjectListResult,
    parse_row,
    parse_rows,
)
from eduplay.services.taxonomy import NURSERY_SUBJECTS, grade_lookup_names, grade_slug, subject_route

logger = logging.getLogger(__name__)

NURSERY = "Nursery"


def list_grades(store: DatabaseProvider) -> List[Dict[str, Any]]:
    """All grades in id order, each with the slug used by /class/<slug> links."""
    grades = parse_rows(Grade, store.select("grades", columns="id, name", order_by="id"))
    return [{"id": g.id, "name": g.name, "slug": grade_slug(g.name)} for g in grades]


def find_grade(store: DatabaseProvider, standard: Optional[str]) -> Optional[Grade]:
    """Look a route token up in the grades table, trying the fallback name on a miss."""
    for name in grade_lookup_names(standard):
        row = store.select_one("grades", {"name": name})
        if row:
            return parse_row(Grade, row)
        logger.debug(f"No grade named {name!r}")
    return None


def subjects_for_grade(store: DatabaseProvider, grade_id: int) -> List[Subject]:
    return parse_rows(Subject, store.select("subjects", filters={"grade_id": grade_id}))


def subjects_for_standard(store: DatabaseProvider, standard: Optional[str]) -> SubjectListResult:
    """
    Subjects shown on /class/<standard>.

    The Nursery grade always gets the fixed nursery subject list; any other
    grade gets its subjects from the store. A grade that cannot be found
    yields an empty list, not an error.
    """
    label = f"{standard} Standard" if standard else "5th Standard"
    grade_name = grade_lookup_names(standard)[0]

    try:
        if grade_name == NURSERY:
            subjects = [Subject(**s) for s in NURSERY_SUBJECTS]
        else:
            grade = find_grade(store, standard)
            subjects = subjects_for_grade(store, grade.id) if grade else []
            grade_name = grade.name if grade else grade_name
    except StoreError as e:
        logger.error(f"Error loading subjects for standard {standard!r}: {e}")
        return SubjectListResult(
            state=ResultState.FAILED, standard_label=label, message=messages.LOAD_FAILED
        )

    cards = [
        SubjectCard(
            id=s.id,
            name=s.name,
            description=s.description,
            route=subject_route(s.name, standard),
        )
        for s in subjects
    ]
    if not cards:
        return SubjectListResult(
            state=ResultState.EMPTY,
            standard_label=label,
            grade_name=grade_name,
            message=messages.NO_SUBJECTS_FOUND,
        )
    return SubjectListResult(state=ResultState.LOADED, standard_label=label, grade_name=grade_name, subjects=cards)


def subjects_for_profile(store: DatabaseProvider, profile: Optional[Profile]) -> List[Subject]:
    """Subjects of the grade named in a student's profile ([] when there is none)."""
    if profile is None or not profile.grade:
        return []
    row = store.select_one("grades", {"name": profile.grade}, columns="id, name")
    if not row:
        logger.debug(f"Profile {profile.id} names unknown grade {profile.grade!r}")
        return []
    return subjects_for_grade(store, parse_row(Grade, row).id)
