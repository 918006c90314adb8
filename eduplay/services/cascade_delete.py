"""
Cascading Deletion Coordinator

The store has no foreign-key cascade, so removing a grade, subject or chapter
means deleting its dependent rows by hand, bottom-up:

    contents -> chapters -> subjects -> grade

Each step is a single remote call with no retry and no transaction around the
sequence. Every step is written to a CascadeLog. When a step fails the steps
after it are not issued (they would orphan the rows the failed step was meant
to remove); the log can be handed back to ``resume`` to roll the cascade
forward from the failed step.

Local admin state is reconciled optimistically: every id targeted by the
cascade is dropped from the snapshot whether or not its delete succeeded.
"""
import logging
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel

from eduplay import messages
from eduplay.db.db_interface import DatabaseProvider, StoreError
from eduplay.models.schemas import Chapter, Content, Grade, Subject

logger = logging.getLogger(__name__)

PENDING = "pending"
DONE = "done"
FAILED = "failed"
SKIPPED = "skipped"


class CascadeStep(BaseModel):
    table: str
    filters: Optional[Dict[str, int]] = None
    in_filters: Optional[Dict[str, List[int]]] = None
    status: str = PENDING
    error: Optional[str] = None


class CascadeLog(BaseModel):
    entity: str  # 'grade', 'subject' or 'chapter'
    target_id: int
    steps: List[CascadeStep] = []
    # ids targeted at each level: {'subjects': [...], 'chapters': [...]}
    targeted: Dict[str, List[int]] = {}

    @property
    def failed_step(self) -> Optional[CascadeStep]:
        return next((s for s in self.steps if s.status == FAILED), None)

    @property
    def pending_steps(self) -> List[CascadeStep]:
        return [s for s in self.steps if s.status in (PENDING, FAILED)]

    @property
    def complete(self) -> bool:
        return not self.pending_steps


class CascadeResult(BaseModel):
    status: str  # 'done', 'cancelled' or 'partial'
    log: Optional[CascadeLog] = None
    error: Optional[str] = None


class AdminState(BaseModel):
    """Snapshot of the rows the admin console holds."""
    grades: List[Grade] = []
    subjects: List[Subject] = []
    chapters: List[Chapter] = []
    contents: List[Content] = []

    def reconcile(self, log: CascadeLog) -> "AdminState":
        """A new snapshot without any row the cascade targeted, successful or not."""
        target = log.target_id
        subject_ids = set(log.targeted.get("subjects", []))
        chapter_ids = set(log.targeted.get("chapters", []))

        if log.entity == "grade":
            grades = [g for g in self.grades if g.id != target]
            subjects = [s for s in self.subjects if s.grade_id != target and s.id not in subject_ids]
            chapters = [c for c in self.chapters if c.grade_id != target and c.id not in chapter_ids]
        elif log.entity == "subject":
            grades = list(self.grades)
            subjects = [s for s in self.subjects if s.id != target]
            chapters = [c for c in self.chapters if c.subject_id != target and c.id not in chapter_ids]
        else:
            grades = list(self.grades)
            subjects = list(self.subjects)
            chapters = [c for c in self.chapters if c.id != target]

        contents = [c for c in self.contents if c.chapter_id is None or c.chapter_id not in chapter_ids]
        return AdminState(grades=grades, subjects=subjects, chapters=chapters, contents=contents)


def _always_confirm(message: str) -> bool:
    return True


def _step_shape(step: CascadeStep):
    # The contents step's chapter ids depend on what is still in the store,
    # so only its table and filter column take part in the comparison
    if step.table == "contents" and step.in_filters is not None:
        return step.table, step.filters, tuple(sorted(step.in_filters))
    return step.table, step.filters, step.in_filters


class CascadeDeleter:
    """Runs grade / subject / chapter deletions with their dependent rows."""

    def __init__(self, store: DatabaseProvider, confirm: Callable[[str], bool] = _always_confirm):
        self.store = store
        self.confirm = confirm

    def _ids(self, table: str, filters: Dict[str, int]) -> List[int]:
        return [row["id"] for row in self.store.select(table, columns="id", filters=filters)]

    # -- planning ----------------------------------------------------------

    def _targets(self, entity: str, target_id: int) -> Dict[str, List[int]]:
        """Dependent ids of a cascade target, read from the store."""
        if entity == "chapter":
            return {"chapters": [target_id]}
        if entity == "subject":
            return {"subjects": [target_id], "chapters": self._ids("chapters", {"subject_id": target_id})}
        if entity == "grade":
            return {
                "subjects": self._ids("subjects", {"grade_id": target_id}),
                "chapters": self._ids("chapters", {"grade_id": target_id}),
            }
        raise ValueError(f"Unknown cascade entity: {entity!r}")

    @staticmethod
    def _plan(entity: str, target_id: int, targeted: Dict[str, List[int]]) -> List[CascadeStep]:
        """Bottom-up delete steps for a cascade target."""
        if entity == "chapter":
            return [
                CascadeStep(table="contents", filters={"chapter_id": target_id}),
                CascadeStep(table="chapters", filters={"id": target_id}),
            ]

        chapter_ids = targeted.get("chapters", [])
        contents = CascadeStep(table="contents", in_filters={"chapter_id": chapter_ids})
        if not chapter_ids:
            contents.status = SKIPPED
        if entity == "subject":
            return [
                contents,
                CascadeStep(table="chapters", filters={"subject_id": target_id}),
                CascadeStep(table="subjects", filters={"id": target_id}),
            ]
        return [
            contents,
            CascadeStep(table="chapters", filters={"grade_id": target_id}),
            CascadeStep(table="subjects", filters={"grade_id": target_id}),
            CascadeStep(table="grades", filters={"id": target_id}),
        ]

    def _start(self, entity: str, target_id: int) -> CascadeResult:
        log = CascadeLog(entity=entity, target_id=target_id)
        try:
            log.targeted = self._targets(entity, target_id)
        except StoreError as e:
            return self._fetch_failed(log, e)
        log.steps = self._plan(entity, target_id, log.targeted)
        return self.run(log)

    def _fetch_failed(self, log: CascadeLog, error: StoreError) -> CascadeResult:
        logger.error(f"Could not collect dependents of {log.entity} {log.target_id}: {error}")
        return CascadeResult(status="partial", log=log, error=str(error))

    def _still_has_rows(self, step: CascadeStep) -> bool:
        return bool(self.store.select(step.table, columns="id", filters=step.filters, in_filters=step.in_filters))

    # -- execution ---------------------------------------------------------

    def run(self, log: CascadeLog) -> CascadeResult:
        """Issue every unfinished step of ``log`` in order, stopping at the first failure."""
        for step in log.steps:
            if step.status in (DONE, SKIPPED):
                continue
            try:
                self.store.delete(step.table, filters=step.filters, in_filters=step.in_filters)
            except StoreError as e:
                step.status = FAILED
                step.error = str(e)
                logger.error(
                    f"Cascade delete of {log.entity} {log.target_id} failed at '{step.table}': {e}; "
                    f"{len(log.pending_steps)} step(s) left"
                )
                return CascadeResult(status="partial", log=log, error=str(e))
            step.status = DONE
            step.error = None
            logger.info(f"Cascade delete of {log.entity} {log.target_id}: cleared '{step.table}' "
                        f"(filters={step.filters}, in={step.in_filters})")
        return CascadeResult(status="done", log=log)

    def resume(self, log: CascadeLog) -> CascadeResult:
        """
        Roll a partially applied cascade forward from its failed step.

        The steps are planned again from ``log.entity`` and ``log.target_id``;
        a log whose steps differ from that plan in table, filters or order is
        rejected with ValueError. A step the log reports as done is only
        skipped when the store has no rows left for it.
        """
        logger.info(f"Resuming cascade delete of {log.entity} {log.target_id}")
        fresh = CascadeLog(entity=log.entity, target_id=log.target_id)
        try:
            fresh.targeted = self._targets(log.entity, log.target_id)
        except StoreError as e:
            return self._fetch_failed(fresh, e)
        fresh.steps = self._plan(log.entity, log.target_id, fresh.targeted)

        if [_step_shape(s) for s in log.steps] != [_step_shape(s) for s in fresh.steps]:
            logger.warning(f"Rejected cascade log for {log.entity} {log.target_id}: steps do not match the plan")
            raise ValueError(f"Cascade log does not match the delete plan of {log.entity} {log.target_id}")

        try:
            for claimed, step in zip(log.steps, fresh.steps):
                if step.status == SKIPPED:
                    continue
                if claimed.status == DONE and not self._still_has_rows(step):
                    step.status = DONE
        except StoreError as e:
            return self._fetch_failed(fresh, e)
        return self.run(fresh)

    # -- entry points ------------------------------------------------------

    def delete_chapter(self, chapter_id: int) -> CascadeResult:
        if not self.confirm(messages.CONFIRM_DELETE_CHAPTER):
            return CascadeResult(status="cancelled")
        return self._start("chapter", chapter_id)

    def delete_subject(self, subject_id: int) -> CascadeResult:
        if not self.confirm(messages.CONFIRM_DELETE_SUBJECT):
            return CascadeResult(status="cancelled")
        return self._start("subject", subject_id)

    def delete_grade(self, grade_id: int) -> CascadeResult:
        if not self.confirm(messages.CONFIRM_DELETE_GRADE):
            return CascadeResult(status="cancelled")
        return self._start("grade", grade_id)
