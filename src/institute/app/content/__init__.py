"""Public site content: courses, faculty, notices and the founder message."""

from .models import (
    Course,
    CourseCreate,
    CourseUpdate,
    Faculty,
    FacultyCreate,
    FacultyUpdate,
    FounderMessage,
    FounderMessageCreate,
    FounderMessageUpdate,
    Notice,
    NoticeCreate,
    NoticePriority,
    NoticeType,
    NoticeUpdate,
    PopupNotice,
)
from .queries import CourseQueries, FacultyQueries, FounderQueries, NoticeQueries
from .routes import ContentResource, configure_content_router, configure_notice_router

__all__ = [
    "ContentResource",
    "Course",
    "CourseCreate",
    "CourseQueries",
    "CourseUpdate",
    "Faculty",
    "FacultyCreate",
    "FacultyQueries",
    "FacultyUpdate",
    "FounderMessage",
    "FounderMessageCreate",
    "FounderMessageUpdate",
    "FounderQueries",
    "Notice",
    "NoticeCreate",
    "NoticePriority",
    "NoticeQueries",
    "NoticeType",
    "NoticeUpdate",
    "PopupNotice",
    "configure_content_router",
    "configure_notice_router",
]
