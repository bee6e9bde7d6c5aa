from typing import Dict, Generic, List, Optional, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class PostMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    date: str
    slug: str
    excerpt: Optional[str] = None
    tags: Tuple[str, ...] = ()
    modified: Optional[str] = None
    draft: bool = False


class Post(PostMeta):
    content: str  # Rendered HTML
    formattedDate: str
    readingTime: str = "1 min"


class TagInfo(BaseModel):
    name: str
    count: int
    posts: List[Post] = Field(default_factory=list)


class Pagination(BaseModel):
    currentPage: int
    totalPages: int
    itemsPerPage: int
    totalItems: int
    hasNextPage: bool
    hasPrevPage: bool


class PaginatedResult(BaseModel, Generic[T]):
    items: List[T]
    pagination: Pagination


# API schemas


class PostSummary(BaseModel):
    slug: str
    title: str
    date: str
    formattedDate: str
    excerpt: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    modified: Optional[str] = None
    readingTime: Optional[str] = None
    draft: bool = False

    @classmethod
    def from_post(cls, post: Post) -> "PostSummary":
        return cls(**post.model_dump(exclude={"content"}))


class PostDetail(PostSummary):
    content: str

    @classmethod
    def from_post(cls, post: Post) -> "PostDetail":
        return cls(**post.model_dump())


class PaginatedPosts(BaseModel):
    items: List[PostSummary]
    pagination: Pagination
    links: Dict[str, Optional[str]] = Field(default_factory=dict)
    tag: Optional[str] = None
    search: Optional[str] = None


class TagSummary(BaseModel):
    name: str
    count: int
    posts: List[str] = Field(default_factory=list)  # Slugs, newest first


class SearchResponse(BaseModel):
    query: str
    total: int
    results: List[PostSummary]


class CreatePostRequest(BaseModel):
    title: str
    content: str
    tags: List[str] = Field(default_factory=list)
    excerpt: Optional[str] = None
    draft: bool = False


class CreatePostResponse(BaseModel):
    success: bool
    slug: str
    path: str
