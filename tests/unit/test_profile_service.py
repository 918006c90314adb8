import pytest
from unittest.mock import MagicMock

from eduplay.models.schemas import ProfileUpdate
from eduplay.services.profile_service import ProfileService

pytestmark = pytest.mark.unit


@pytest.fixture
def store():
    return MagicMock()


class TestProfileService:

    def test_get_profile(self, store):
        store.select_one.return_value = {"id": "u1", "name": "Rina", "grade": "Grade 1", "age": 7}

        profile = ProfileService(store).get_profile("u1")

        assert profile.name == "Rina"
        store.select_one.assert_called_once_with("profiles", {"id": "u1"})

    def test_missing_profile(self, store):
        store.select_one.return_value = None
        assert ProfileService(store).get_profile("u1") is None

    def test_save_profile_upserts_with_timestamp(self, store):
        store.upsert.side_effect = lambda table, values: values
        update = ProfileUpdate(name="Rina", age=7, grade="Grade 1")

        profile = ProfileService(store).save_profile("u1", update)

        table, values = store.upsert.call_args.args
        assert table == "profiles"
        assert values["id"] == "u1"
        assert values["updated_at"] is not None
        assert profile.grade == "Grade 1"

    def test_upload_avatar(self, store):
        storage = MagicMock()
        storage.public_url.return_value = "https://cdn.example/avatars/u1.jpg"

        url = ProfileService(store, storage).upload_avatar("u1", "me.jpg", b"\xff\xd8", "image/jpeg")

        assert url == "https://cdn.example/avatars/u1.jpg"
        storage.upload.assert_called_once_with("avatars", "u1.jpg", b"\xff\xd8", content_type="image/jpeg", upsert=True)
        storage.public_url.assert_called_once_with("avatars", "u1.jpg")

    def test_upload_avatar_without_extension(self, store):
        storage = MagicMock()
        ProfileService(store, storage).upload_avatar("u1", "avatar", b"data", None)
        assert storage.upload.call_args.args[1] == "u1.png"

    def test_upload_avatar_needs_storage(self, store):
        with pytest.raises(RuntimeError):
            ProfileService(store).upload_avatar("u1", "me.jpg", b"", None)

    def test_dashboard(self, store):
        store.select_one.side_effect = [
            {"id": "u1", "name": None, "grade": "Grade 1"},
            {"id": 3, "name": "Grade 1"},
        ]
        store.select.return_value = [{"id": 10, "name": "Math", "grade_id": 3}]

        summary = ProfileService(store).dashboard("u1")

        assert summary["name"] == "User"
        assert summary["grade"] == "Grade 1"
        assert summary["subjects"] == [{"id": 10, "name": "Math", "grade_id": 3, "description": None}]

    def test_dashboard_without_profile(self, store):
        store.select_one.return_value = None
        assert ProfileService(store).dashboard("u1") is None

    def test_grade_names(self, store):
        store.select.return_value = [{"name": "Grade 1"}, {"name": "Nursery"}]
        assert ProfileService(store).grade_names() == ["Grade 1", "Nursery"]
