"""Request and response models for site content."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, computed_field

from institute.common import to_nepali_date


class NoticeType(StrEnum):
    NEWS = "news"
    NOTICE = "notice"


class NoticePriority(StrEnum):
    """Notice priorities, most pressing first."""

    URGENT = "urgent"
    IMPORTANT = "important"
    REGULAR = "regular"


class _Input(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")


class _Record(BaseModel):
    id: str
    created_at: str
    updated_at: str


class CourseCreate(_Input):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=2000)
    duration: str = Field(min_length=1, max_length=100)
    level: str = Field(min_length=1, max_length=100)
    image: str | None = None
    price: str | None = None
    is_active: bool = True
    display_order: int = 0


class CourseUpdate(_Input):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=1, max_length=2000)
    duration: str | None = Field(default=None, min_length=1, max_length=100)
    level: str | None = Field(default=None, min_length=1, max_length=100)
    image: str | None = None
    price: str | None = None
    is_active: bool | None = None
    display_order: int | None = None


class Course(_Record):
    title: str
    description: str
    duration: str
    level: str
    image: str | None
    price: str | None
    is_active: bool
    display_order: int


class FacultyCreate(_Input):
    name: str = Field(min_length=1, max_length=100)
    designation: str = Field(min_length=1, max_length=100)
    qualification: str = Field(min_length=1, max_length=200)
    specialization: str = Field(min_length=1, max_length=200)
    image: str | None = None
    is_active: bool = True
    display_order: int = 0


class FacultyUpdate(_Input):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    designation: str | None = Field(default=None, min_length=1, max_length=100)
    qualification: str | None = Field(default=None, min_length=1, max_length=200)
    specialization: str | None = Field(default=None, min_length=1, max_length=200)
    image: str | None = None
    is_active: bool | None = None
    display_order: int | None = None


class Faculty(_Record):
    name: str
    designation: str
    qualification: str
    specialization: str
    image: str | None
    is_active: bool
    display_order: int


class FounderMessageCreate(_Input):
    name: str = Field(min_length=1, max_length=100)
    designation: str = Field(min_length=1, max_length=100)
    message: str = Field(min_length=1, max_length=5000)
    image: str | None = None
    is_active: bool = True


class FounderMessageUpdate(_Input):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    designation: str | None = Field(default=None, min_length=1, max_length=100)
    message: str | None = Field(default=None, min_length=1, max_length=5000)
    image: str | None = None
    is_active: bool | None = None


class FounderMessage(_Record):
    name: str
    designation: str
    message: str
    image: str | None
    is_active: bool


class NoticeCreate(_Input):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1, max_length=5000)
    type: NoticeType = NoticeType.NOTICE
    priority: NoticePriority = NoticePriority.REGULAR
    show_as_popup: bool = False
    is_active: bool = True


class NoticeUpdate(_Input):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    content: str | None = Field(default=None, min_length=1, max_length=5000)
    type: NoticeType | None = None
    priority: NoticePriority | None = None
    show_as_popup: bool | None = None
    is_active: bool | None = None


class Notice(_Record):
    title: str
    content: str
    type: NoticeType
    priority: NoticePriority
    show_as_popup: bool
    is_active: bool

    @computed_field
    @property
    def published_bs(self) -> str:
        """Publication date in the Bikram Sambat calendar."""
        return to_nepali_date(self.created_at)


class PopupNotice(BaseModel):
    """The slice of a notice the popup needs."""

    id: str
    title: str
    content: str
    priority: NoticePriority
