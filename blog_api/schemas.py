from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from blog_api.models import TAG_SEPARATOR


def _fits_bcrypt(password: str) -> str:
    # bcrypt only hashes the first 72 bytes of its input.
    if len(password.encode()) > 72:
        raise ValueError("password must be at most 72 bytes long")
    return password


Password = Annotated[str, Field(min_length=1), AfterValidator(_fits_bcrypt)]


# --- User ---

class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: Password


class UserCreateRequest(BaseModel):
    user: UserCreate


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserLoginRequest(BaseModel):
    user: UserLogin


class UserUpdate(BaseModel):
    """
    Partial user update.  Unknown keys are kept (``extra="allow"``) so the
    service can reject the whole payload and name every offending field.
    """

    name: str | None = Field(None, min_length=1, max_length=100)
    email: EmailStr | None = None
    password: Password | None = None
    bio: str | None = None
    image: str | None = Field(None, max_length=500)
    model_config = ConfigDict(extra="allow")


class UserUpdateRequest(BaseModel):
    user_update_data: UserUpdate = Field(alias="userUpdateData")
    model_config = ConfigDict(populate_by_name=True)


# --- Article ---

class ArticleCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    description: str = ""
    body: str = ""
    tag_list: list[str] = Field(default_factory=list, alias="tagList")
    model_config = ConfigDict(populate_by_name=True)

    @field_validator("tag_list")
    @classmethod
    def _tags_are_serialisable(cls, tags: list[str]) -> list[str]:
        for tag in tags:
            if not tag or TAG_SEPARATOR in tag:
                raise ValueError(f"tags must be non-empty and must not contain '{TAG_SEPARATOR}'")
        return tags


class ArticleCreateRequest(BaseModel):
    article: ArticleCreate


class ArticleUpdate(BaseModel):
    """Partial article update; see ``UserUpdate`` for why extras are allowed."""

    title: str | None = Field(None, min_length=1, max_length=300)
    description: str | None = None
    body: str | None = None
    model_config = ConfigDict(extra="allow")


class ArticleUpdateRequest(BaseModel):
    article: ArticleUpdate


# --- Pagination ---

class PaginatedListResponse(BaseModel):
    total_count: int
    total_pages: int
    current_page: int
    count_on_current_page: int
    data: list[dict]
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
