from fastapi import FastAPI
from fastapi.testclient import TestClient

from mdblog import dependencies as deps
from mdblog.errors import ConflictError, DataError, ValidationError
from mdblog.routers import posts
from tests.conftest import FakePostsService, make_post


def make_app(fake_service: FakePostsService):
    app = FastAPI()
    app.dependency_overrides[deps.get_posts_service] = lambda: fake_service
    app.include_router(posts.router)
    return app


def _posts(count):
    return [
        make_post(slug=f"post-{i}", title=f"Post {i}", date=f"2025-01-{i:02d}")
        for i in range(count, 0, -1)
    ]


def test_list_posts_first_page():
    client = TestClient(make_app(FakePostsService(_posts(12))))

    res = client.get("/posts")

    assert res.status_code == 200
    body = res.json()
    assert [p["slug"] for p in body["items"]][:2] == ["post-12", "post-11"]
    assert len(body["items"]) == 10
    assert "content" not in body["items"][0]
    assert body["pagination"] == {
        "currentPage": 1,
        "totalPages": 2,
        "itemsPerPage": 10,
        "totalItems": 12,
        "hasNextPage": True,
        "hasPrevPage": False,
    }
    assert body["links"]["next"] == "http://testserver/posts?page=2"
    assert body["links"]["prev"] is None


def test_list_posts_filters_by_tag_and_query():
    service = FakePostsService(
        [
            make_post(slug="a", title="Python tips", tags=["python"]),
            make_post(slug="b", title="Rust tips", tags=["rust"]),
            make_post(slug="c", title="Python news", tags=["python"]),
        ]
    )
    client = TestClient(make_app(service))

    res = client.get("/posts", params={"tag": "python", "q": "tips"})

    body = res.json()
    assert [p["slug"] for p in body["items"]] == ["a"]
    assert body["tag"] == "python"
    assert body["search"] == "tips"


def test_list_posts_clamps_out_of_range_page():
    client = TestClient(make_app(FakePostsService(_posts(3))))

    res = client.get("/posts", params={"page": 50})

    assert res.status_code == 200
    assert res.json()["pagination"]["currentPage"] == 1


def test_list_posts_load_failure_returns_500():
    client = TestClient(make_app(FakePostsService(error=DataError("nothing loaded"))))

    res = client.get("/posts")

    assert res.status_code == 500
    assert res.json() == {"detail": "Failed to retrieve posts"}


def test_get_post_success():
    post = make_post(slug="hello", title="Hello", content="<p>Hi</p>", tags=["x"])
    client = TestClient(make_app(FakePostsService([post])))

    res = client.get("/posts/hello")

    assert res.status_code == 200
    body = res.json()
    assert body["title"] == "Hello"
    assert body["content"] == "<p>Hi</p>"
    assert body["tags"] == ["x"]
    assert body["readingTime"] == "1 min"


def test_get_post_returns_404_when_missing():
    client = TestClient(make_app(FakePostsService(_posts(1))))

    res = client.get("/posts/missing")

    assert res.status_code == 404
    assert res.json() == {"detail": "Post not found"}


def test_get_post_load_failure_returns_500():
    client = TestClient(make_app(FakePostsService(error=DataError("boom"))))

    res = client.get("/posts/hello")

    assert res.status_code == 500
    assert res.json() == {"detail": "Failed to retrieve post"}


def test_create_post_returns_201():
    service = FakePostsService()
    client = TestClient(make_app(service))

    res = client.post(
        "/posts",
        json={"title": "New Post", "content": "Body long enough to pass.", "tags": ["a"]},
    )

    assert res.status_code == 201
    assert res.json() == {"success": True, "slug": "new-post", "path": "/posts/new-post"}
    assert [p.slug for p in service.created] == ["new-post"]


def test_create_post_requires_title_and_content():
    client = TestClient(make_app(FakePostsService()))

    res = client.post("/posts", json={"title": "  ", "content": "Body"})

    assert res.status_code == 400
    assert res.json() == {"detail": "Title and content are required"}


def test_create_post_conflict_returns_409():
    service = FakePostsService(error=ConflictError("A post with slug 'x' already exists"))
    client = TestClient(make_app(service))

    res = client.post("/posts", json={"title": "X", "content": "Body"})

    assert res.status_code == 409
    assert res.json() == {"detail": "A post with slug 'x' already exists"}


def test_create_post_validation_error_returns_reasons():
    service = FakePostsService(error=ValidationError(["Duplicate tags are not allowed"]))
    client = TestClient(make_app(service))

    res = client.post("/posts", json={"title": "X", "content": "Body", "tags": ["a", "a"]})

    assert res.status_code == 400
    detail = res.json()["detail"]
    assert detail["kind"] == "ValidationError"
    assert detail["reasons"] == ["Duplicate tags are not allowed"]


def test_search_returns_ranked_results():
    service = FakePostsService(
        [
            make_post(slug="body", title="Notes", content="<p>typescript inside</p>"),
            make_post(slug="tips", title="TypeScript Tips"),
        ]
    )
    client = TestClient(make_app(service))

    res = client.get("/search", params={"q": "typescript"})

    assert res.status_code == 200
    body = res.json()
    assert body["query"] == "typescript"
    assert body["total"] == 2
    assert [p["slug"] for p in body["results"]] == ["tips", "body"]


def test_search_blank_query_returns_empty():
    client = TestClient(make_app(FakePostsService(_posts(2))))

    res = client.get("/search")

    assert res.json() == {"query": "", "total": 0, "results": []}
