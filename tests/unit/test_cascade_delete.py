import pytest
from unittest.mock import MagicMock, call

from eduplay import messages
from eduplay.db.db_interface import StoreError
from eduplay.models.schemas import Chapter, Content, Grade, Subject
from eduplay.services.cascade_delete import (
    DONE,
    FAILED,
    PENDING,
    SKIPPED,
    AdminState,
    CascadeDeleter,
    CascadeLog,
    CascadeStep,
)

pytestmark = pytest.mark.unit


def _ids_store(subject_ids=(), chapter_ids=()):
    """Mock store answering the dependent-id lookups."""
    store = MagicMock()

    def select(table, columns="*", filters=None, **kwargs):
        if table == "subjects":
            return [{"id": i} for i in subject_ids]
        if table == "chapters":
            return [{"id": i} for i in chapter_ids]
        return []

    store.select.side_effect = select
    return store


def _state():
    return AdminState(
        grades=[Grade(id=1, name="Grade 1"), Grade(id=2, name="Grade 2")],
        subjects=[
            Subject(id=10, name="Math", grade_id=1),
            Subject(id=11, name="English", grade_id=1),
            Subject(id=20, name="Science", grade_id=2),
        ],
        chapters=[
            Chapter(id=100, name="Counting", grade_id=1, subject_id=10),
            Chapter(id=110, name="Letters", grade_id=1, subject_id=11),
            Chapter(id=200, name="Plants", grade_id=2, subject_id=20),
        ],
        contents=[
            Content(id=1, title="Count", chapter_id=100),
            Content(id=2, title="ABC", chapter_id=110),
            Content(id=3, title="Leaves", chapter_id=200),
            Content(id=4, title="Loose"),
        ],
    )


class TestDeleteGrade:

    def test_bottom_up_order(self):
        store = _ids_store(subject_ids=[10, 11], chapter_ids=[100, 110])

        result = CascadeDeleter(store).delete_grade(1)

        assert result.status == "done"
        assert store.mock_calls[:2] == [
            call.select("subjects", columns="id", filters={"grade_id": 1}),
            call.select("chapters", columns="id", filters={"grade_id": 1}),
        ]
        assert store.delete.call_args_list == [
            call("contents", filters=None, in_filters={"chapter_id": [100, 110]}),
            call("chapters", filters={"grade_id": 1}, in_filters=None),
            call("subjects", filters={"grade_id": 1}, in_filters=None),
            call("grades", filters={"id": 1}, in_filters=None),
        ]
        assert result.log.targeted == {"subjects": [10, 11], "chapters": [100, 110]}
        assert all(step.status == DONE for step in result.log.steps)

    def test_no_chapters_skips_content_delete(self):
        store = _ids_store(subject_ids=[10], chapter_ids=[])

        result = CascadeDeleter(store).delete_grade(1)

        assert result.status == "done"
        assert [c.args[0] for c in store.delete.call_args_list] == ["chapters", "subjects", "grades"]
        assert result.log.steps[0].status == SKIPPED

    def test_declined_confirmation_issues_nothing(self):
        store = MagicMock()
        prompts = []

        result = CascadeDeleter(store, confirm=lambda msg: prompts.append(msg) or False).delete_grade(1)

        assert result.status == "cancelled"
        assert result.log is None
        assert prompts == [messages.CONFIRM_DELETE_GRADE]
        assert store.mock_calls == []

    def test_failed_lookup_deletes_nothing(self):
        store = MagicMock()
        store.select.side_effect = StoreError("timeout")

        result = CascadeDeleter(store).delete_grade(1)

        assert result.status == "partial"
        assert result.error == "timeout"
        store.delete.assert_not_called()


class TestDeleteSubject:

    def test_order(self):
        store = _ids_store(chapter_ids=[100])

        result = CascadeDeleter(store).delete_subject(10)

        assert result.status == "done"
        store.select.assert_called_once_with("chapters", columns="id", filters={"subject_id": 10})
        assert store.delete.call_args_list == [
            call("contents", filters=None, in_filters={"chapter_id": [100]}),
            call("chapters", filters={"subject_id": 10}, in_filters=None),
            call("subjects", filters={"id": 10}, in_filters=None),
        ]

    def test_partial_failure_stops_and_keeps_pending_steps(self):
        store = _ids_store(chapter_ids=[100])
        store.delete.side_effect = [1, StoreError("permission denied"), 1]

        result = CascadeDeleter(store).delete_subject(10)

        assert result.status == "partial"
        assert result.error == "permission denied"
        assert store.delete.call_count == 2
        assert [s.status for s in result.log.steps] == [DONE, FAILED, PENDING]
        assert result.log.failed_step.table == "chapters"
        assert not result.log.complete

    def test_resume_rolls_forward_from_failed_step(self):
        store = _ids_store(chapter_ids=[100])
        store.delete.side_effect = [1, StoreError("permission denied")]
        log = CascadeDeleter(store).delete_subject(10).log

        retry_store = _ids_store(chapter_ids=[100])
        result = CascadeDeleter(retry_store).resume(log)

        assert result.status == "done"
        assert retry_store.delete.call_args_list == [
            call("chapters", filters={"subject_id": 10}, in_filters=None),
            call("subjects", filters={"id": 10}, in_filters=None),
        ]
        assert result.log.complete
        assert result.log.failed_step is None

    def test_resume_rejects_a_reordered_log(self):
        log = CascadeLog(
            entity="grade",
            target_id=3,
            steps=[
                CascadeStep(table="grades", filters={"id": 3}),
                CascadeStep(table="subjects", filters={"id": 12}),
            ],
        )
        store = _ids_store(subject_ids=[10, 11], chapter_ids=[100, 101])

        with pytest.raises(ValueError):
            CascadeDeleter(store).resume(log)
        store.delete.assert_not_called()

    def test_resume_rejects_foreign_filters(self):
        store = _ids_store(chapter_ids=[100])
        log = CascadeDeleter(_ids_store(chapter_ids=[100])).delete_subject(10).log
        log.steps[2].filters = {"id": 12}

        with pytest.raises(ValueError):
            CascadeDeleter(store).resume(log)
        store.delete.assert_not_called()

    def test_resume_rejects_unknown_entity(self):
        with pytest.raises(ValueError):
            CascadeDeleter(MagicMock()).resume(CascadeLog(entity="profile", target_id=1))

    def test_resume_reissues_a_done_step_with_rows_left(self):
        store = _ids_store(chapter_ids=[100])
        store.delete.side_effect = StoreError("offline")
        log = CascadeDeleter(store).delete_subject(10).log
        # Claims the chapters are gone while the store still has chapter 100
        log.steps[1].status = DONE

        retry_store = _ids_store(chapter_ids=[100])
        result = CascadeDeleter(retry_store).resume(log)

        assert result.status == "done"
        assert [c.args[0] for c in retry_store.delete.call_args_list] == ["contents", "chapters", "subjects"]

    def test_log_survives_serialization(self):
        store = _ids_store(chapter_ids=[100])
        store.delete.side_effect = [StoreError("offline")]
        log = CascadeDeleter(store).delete_subject(10).log

        restored = CascadeLog.model_validate(log.model_dump(mode="json"))

        assert restored == log
        assert len(restored.pending_steps) == 3


class TestDeleteChapter:

    def test_order(self):
        store = MagicMock()

        result = CascadeDeleter(store).delete_chapter(100)

        assert result.status == "done"
        store.select.assert_not_called()
        assert store.delete.call_args_list == [
            call("contents", filters={"chapter_id": 100}, in_filters=None),
            call("chapters", filters={"id": 100}, in_filters=None),
        ]


class TestReconcile:

    def test_subject_delete_drops_every_targeted_row_even_on_failure(self):
        store = _ids_store(chapter_ids=[100])
        store.delete.side_effect = StoreError("offline")
        log = CascadeDeleter(store).delete_subject(10).log

        state = _state().reconcile(log)

        assert [s.id for s in state.subjects] == [11, 20]
        assert [c.id for c in state.chapters] == [110, 200]
        assert [c.id for c in state.contents] == [2, 3, 4]
        assert [g.id for g in state.grades] == [1, 2]

    def test_grade_delete(self):
        log = CascadeDeleter(_ids_store(subject_ids=[10, 11], chapter_ids=[100, 110])).delete_grade(1).log

        state = _state().reconcile(log)

        assert [g.id for g in state.grades] == [2]
        assert [s.id for s in state.subjects] == [20]
        assert [c.id for c in state.chapters] == [200]
        assert [c.id for c in state.contents] == [3, 4]

    def test_chapter_delete(self):
        log = CascadeDeleter(MagicMock()).delete_chapter(110).log

        state = _state().reconcile(log)

        assert [c.id for c in state.chapters] == [100, 200]
        assert [c.id for c in state.contents] == [1, 3, 4]
        assert len(state.subjects) == 3

    def test_reconcile_returns_a_new_snapshot(self):
        before = _state()
        log = CascadeDeleter(MagicMock()).delete_chapter(100).log

        after = before.reconcile(log)

        assert after is not before
        assert len(before.chapters) == 3
