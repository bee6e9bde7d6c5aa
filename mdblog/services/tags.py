from typing import Dict, Iterable, List

from mdblog.schemas.blog import Post, TagInfo


def build_tag_index(posts: Iterable[Post]) -> List[TagInfo]:
    """Group posts by tag, in order of first appearance.

    Tags are compared as exact strings: "JS" and "js" are separate buckets.
    Posts inside each bucket keep the order they were given in.
    """
    buckets: Dict[str, List[Post]] = {}
    for post in posts:
        for tag in post.tags:
            buckets.setdefault(tag, []).append(post)

    return [
        TagInfo(name=name, count=len(tagged), posts=tagged)
        for name, tagged in buckets.items()
    ]


def sort_tags_by_count(tags: Iterable[TagInfo]) -> List[TagInfo]:
    """Most used first; ties keep their first-seen order."""
    return sorted(tags, key=lambda t: t.count, reverse=True)


def posts_with_tag(posts: Iterable[Post], tag: str) -> List[Post]:
    return [post for post in posts if tag in post.tags]
