# Pytest configuration file for the EduPlay test suite
import sys
import os
import tempfile
import pytest

# Add the project root to Python path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from eduplay.db.sql_provider import SQLProvider


# Configure pytest markers
def pytest_configure(config):
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: Unit tests for isolated components")
    config.addinivalue_line("markers", "integration: Integration tests for multiple components")
    config.addinivalue_line("markers", "e2e: End-to-end tests for full system")
    config.addinivalue_line("markers", "slow: Tests that take longer to run")


@pytest.fixture
def temp_db():
    """Create a temporary SQLite database file for testing."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    yield path
    os.unlink(path)


@pytest.fixture
def sql_store(temp_db):
    """A SQLProvider with all tables created on a temporary file."""
    provider = SQLProvider(f"sqlite:///{temp_db}")
    provider.init_db()
    yield provider
    provider.engine.dispose()


@pytest.fixture
def seeded_store(sql_store):
    """
    Grade 1 (id 3) with Math and English, each with one chapter and one content row,
    plus an unrelated Grade 2 row.
    """
    sql_store.insert("grades", {"id": 1, "name": "Nursery"})
    sql_store.insert("grades", {"id": 2, "name": "Grade 2"})
    sql_store.insert("grades", {"id": 3, "name": "Grade 1"})
    sql_store.insert("subjects", {"id": 10, "name": "Math", "grade_id": 3})
    sql_store.insert("subjects", {"id": 11, "name": "English", "grade_id": 3})
    sql_store.insert("subjects", {"id": 12, "name": "Science", "grade_id": 2})
    sql_store.insert("chapters", {"id": 100, "name": "Counting", "grade_id": 3, "subject_id": 10})
    sql_store.insert("chapters", {"id": 101, "name": "Letters", "grade_id": 3, "subject_id": 11})
    sql_store.insert("chapters", {"id": 102, "name": "Plants", "grade_id": 2, "subject_id": 12})
    sql_store.insert("contents", {
        "id": 1000, "title": "Count to ten", "description": "Numbers 1-10", "content_type": "youtube",
        "youtube_link": "https://youtu.be/abc", "class": "1st", "subject": "math", "chapter_id": 100,
        "pages": [{"title": "Count to ten", "description": "Numbers 1-10", "content_type": "youtube",
                   "youtube_link": "https://youtu.be/abc", "file_url": ""}],
    })
    sql_store.insert("contents", {
        "id": 1001, "title": "ABC", "description": "The alphabet", "content_type": "image",
        "file_url": "https://cdn.example/abc.png", "class": "1st", "subject": "english", "chapter_id": 101,
    })
    sql_store.insert("contents", {
        "id": 1002, "title": "Leaves", "description": "Parts of a plant", "content_type": "video",
        "file_url": "https://cdn.example/leaves.mp4", "class": "2nd", "subject": "science", "chapter_id": 102,
    })
    return sql_store
