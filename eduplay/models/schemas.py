from pydantic import BaseModel, Field, ValidationError
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from eduplay.db.db_interface import StoreError

ContentType = Literal["youtube", "image", "video"]


class Grade(BaseModel):
    id: int
    name: str


class Subject(BaseModel):
    id: int
    name: str
    grade_id: Optional[int] = None
    description: Optional[str] = None


class Chapter(BaseModel):
    id: int
    name: str
    grade_id: int
    subject_id: int


class ContentPageRecord(BaseModel):
    """One page of a content item (only the first page is rendered today)."""
    title: str
    description: str
    content_type: ContentType
    youtube_link: Optional[str] = None
    file_url: Optional[str] = None


class Content(BaseModel):
    id: Union[int, str]
    title: str
    description: Optional[str] = None
    content_type: Optional[ContentType] = None
    youtube_link: Optional[str] = None
    file_url: Optional[str] = None
    # 'class' is a Python keyword, so the column is exposed under an alias
    class_name: Optional[str] = Field(default=None, alias="class")
    subject: Optional[str] = None
    chapter_id: Optional[int] = None
    chapter_name: Optional[str] = None
    pages: Optional[List[ContentPageRecord]] = None
    created_at: Optional[datetime] = None

    model_config = {"populate_by_name": True}

    @property
    def media_url(self) -> Optional[str]:
        """The authoritative media link for this content type."""
        if self.content_type == "youtube":
            return self.youtube_link
        return self.file_url


class Profile(BaseModel):
    id: str  # auth identity
    name: Optional[str] = None
    age: Optional[int] = None
    grade: Optional[str] = None  # Grade *name*, not id
    avatar_url: Optional[str] = None
    address: Optional[str] = None
    gender: Optional[str] = None
    bio: Optional[str] = None
    updated_at: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    name: str = Field(..., min_length=1)
    age: int = Field(..., ge=1, le=100)
    grade: str = Field(..., min_length=1)
    avatar_url: Optional[str] = ""
    address: Optional[str] = ""
    gender: Optional[str] = ""
    bio: Optional[str] = ""


class ContentForm(BaseModel):
    """Admin content form; validated before any store call."""
    grade_id: int
    subject_id: int
    chapter_id: int
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    content_type: ContentType = "youtube"
    youtube_link: Optional[str] = ""
    file_url: Optional[str] = ""


class NameRequest(BaseModel):
    name: str = Field(..., min_length=1)


class SubjectRequest(NameRequest):
    grade_id: int


class ChapterRequest(NameRequest):
    grade_id: int
    subject_id: int


class Credentials(BaseModel):
    email: str
    password: str = Field(..., min_length=1)


class ResultState(str, Enum):
    LOADED = "loaded"
    EMPTY = "empty"
    FAILED = "failed"


class ContentListResult(BaseModel):
    state: ResultState
    items: List[Content] = []
    message: Optional[str] = None

    model_config = {"populate_by_name": True}


class ChapterGroup(BaseModel):
    id: str
    name: str
    contents: List[Content] = []


class ContentDetail(BaseModel):
    content: Content
    page: Optional[ContentPageRecord] = None
    chapters: List[ChapterGroup] = []


class SubjectCard(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    route: str


class SubjectListResult(BaseModel):
    state: ResultState
    standard_label: str
    grade_name: Optional[str] = None
    subjects: List[SubjectCard] = []
    message: Optional[str] = None


def parse_row(model, row: Dict[str, Any]):
    """Parse a raw store row into its record type, raising StoreError on shape mismatch."""
    try:
        return model.model_validate(row)
    except ValidationError as e:
        raise StoreError(f"Unexpected {model.__name__} row shape: {e}") from e


def parse_rows(model, rows: List[Dict[str, Any]]) -> list:
    return [parse_row(model, row) for row in rows]
