from sqlalchemy import Column, Integer, String, DateTime, Text, JSON, create_engine, func
from sqlalchemy.orm import declarative_base
from eduplay.config import DATABASE_URL

# Create a base class for declarative class definitions
Base = declarative_base()

# Parent references are plain indexed integers: the hosted store has no
# foreign-key cascade, so parents and children are kept consistent by the
# admin cascade coordinator only.


class Grade(Base):
    """SQLAlchemy model for grades (school years)."""
    __tablename__ = "grades"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, unique=True)  # e.g. 'Grade 1', 'Nursery'


class Subject(Base):
    """SQLAlchemy model for subjects within a grade."""
    __tablename__ = "subjects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    grade_id = Column(Integer, nullable=False, index=True)
    description = Column(Text, nullable=True)


class Chapter(Base):
    """SQLAlchemy model for chapters of a subject."""
    __tablename__ = "chapters"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    grade_id = Column(Integer, nullable=False, index=True)
    subject_id = Column(Integer, nullable=False, index=True)


class Content(Base):
    """SQLAlchemy model for learning content."""
    __tablename__ = "contents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    content_type = Column(String(20), nullable=True)  # 'youtube', 'image', 'video'
    youtube_link = Column(Text, nullable=True)
    file_url = Column(Text, nullable=True)
    class_ = Column("class", String, nullable=True, index=True)  # normalized class key, e.g. '1st'
    subject = Column(String, nullable=True, index=True)  # normalized subject key, e.g. 'math'
    chapter_id = Column(Integer, nullable=True, index=True)
    pages = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Profile(Base):
    """SQLAlchemy model for student profiles (one per auth identity)."""
    __tablename__ = "profiles"

    id = Column(String, primary_key=True)  # auth user id
    name = Column(String, nullable=True)
    age = Column(Integer, nullable=True)
    grade = Column(String, nullable=True)  # grade name, not id
    avatar_url = Column(Text, nullable=True)
    address = Column(Text, nullable=True)
    gender = Column(String(20), nullable=True)
    bio = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)


def get_engine(url: str = None):
    """Get a SQLAlchemy engine instance."""
    return create_engine(url or DATABASE_URL)


