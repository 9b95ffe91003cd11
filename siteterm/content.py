#!/usr/bin/env python3
"""
Read-only post metadata for the terminal's listing commands.

The site's content pipeline owns the posts; the terminal only asks two
questions of it: which categories exist, and which posts belong to a
category. A ContentIndex answers both and can be built from a tree of
markdown files with YAML front matter, from a JSON manifest, or from the
bundled sample posts.

Layout expected by ``ContentIndex.from_directory``::

    <root>/posts/<category>/<post>.md

Front matter keys: title, category, order, place, date. An explicit
``category`` wins over the directory name.
"""

import json
import logging
from dataclasses import dataclass
from datetime import date as date_type, datetime, time
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

import yaml

from .exceptions import ContentError

logger = logging.getLogger(__name__)

DEFAULT_ORDER = 999
DEFAULT_PLACE = 999
POSTS_ROOT = 'posts'
FRONT_MATTER_FENCE = '---'


def _coerce_date(value: Any) -> Optional[datetime]:
    """Normalize a front matter / JSON date value to a datetime."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date_type):
        return datetime.combine(value, time())
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            raise ContentError(f"invalid date: {value!r}")
    raise ContentError(f"invalid date: {value!r}")


def _coerce_int(value: Any, default: int, key: str) -> int:
    if value is None or value == '':
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ContentError(f"invalid {key}: {value!r}")


def _check_category(value: Any) -> str:
    """A category must be a single enterable path segment."""
    name = str(value).strip()
    if not name or name in ('.', '..') or '/' in name or '\\' in name:
        raise ContentError(f"invalid category: {value!r}")
    return name


def category_from_path(path: Union[str, PurePosixPath], posts_root: str = POSTS_ROOT) -> Optional[str]:
    """
    Derive a category from a post path.

    The category is the segment immediately following the ``posts`` root,
    provided the post sits in a sub-directory of it.

    Examples:
        >>> category_from_path('src/posts/web-security/xss.md')
        'web-security'
        >>> category_from_path('posts/readme.md') is None
        True
    """
    parts = PurePosixPath(str(path).replace('\\', '/')).parts
    if posts_root not in parts:
        return None
    index = parts.index(posts_root)
    # posts/<category>/<file>: need at least a directory and a file after root
    if len(parts) - index < 3:
        return None
    return parts[index + 1] or None


@dataclass(frozen=True)
class Post:
    """Metadata for one post as published by the content pipeline."""
    title: str
    category: Optional[str] = None
    order: int = DEFAULT_ORDER
    place: int = DEFAULT_PLACE
    date: Optional[datetime] = None
    path: Optional[str] = None

    def __post_init__(self):
        if self.category is not None and _check_category(self.category) != self.category:
            raise ContentError(f"invalid category: {self.category!r}")

    @classmethod
    def from_mapping(cls, data: Dict[str, Any], path: Optional[str] = None,
                     posts_root: str = POSTS_ROOT) -> 'Post':
        """Build a Post from front matter or a manifest entry."""
        if not isinstance(data, dict):
            raise ContentError(f"post metadata must be a mapping, got {type(data).__name__}")

        path = data.get('path', path)
        title = data.get('title')
        if not title and path:
            title = PurePosixPath(str(path)).name
        if not title:
            raise ContentError("post is missing a title")

        category = data.get('category')
        if category is not None:
            category = _check_category(category)
        elif path:
            category = category_from_path(path, posts_root)

        return cls(
            title=str(title),
            category=category,
            order=_coerce_int(data.get('order'), DEFAULT_ORDER, 'order'),
            place=_coerce_int(data.get('place'), DEFAULT_PLACE, 'place'),
            date=_coerce_date(data.get('date')),
            path=str(path) if path else None,
        )

    def sort_key(self) -> Tuple:
        """Order, then place, then newest first, then title."""
        stamp = -self.date.timestamp() if self.date else 0.0
        return (self.order, self.place, self.date is None, stamp, self.title)


def split_front_matter(text: str) -> Tuple[Dict[str, Any], str]:
    """
    Split a markdown document into its YAML front matter and body.

    Documents without a leading ``---`` fence have empty front matter.
    """
    lines = text.splitlines()
    if not lines or lines[0].strip() != FRONT_MATTER_FENCE:
        return {}, text

    for end, line in enumerate(lines[1:], start=1):
        if line.strip() == FRONT_MATTER_FENCE:
            header = '\n'.join(lines[1:end])
            body = '\n'.join(lines[end + 1:])
            break
    else:
        raise ContentError("unterminated front matter")

    try:
        data = yaml.safe_load(header) or {}
    except yaml.YAMLError as e:
        raise ContentError(f"invalid front matter: {e}")
    if not isinstance(data, dict):
        raise ContentError("front matter must be a mapping")
    return data, body


class ContentIndex:
    """
    Read-only view over the site's posts.

    Examples:
        >>> index = ContentIndex([Post('b.md', 'web'), Post('a.md', 'net')])
        >>> index.categories()
        ['net', 'web']
    """

    def __init__(self, posts: Iterable[Post] = ()):
        self._posts: Tuple[Post, ...] = tuple(posts)

    def __len__(self) -> int:
        return len(self._posts)

    def __iter__(self) -> Iterator[Post]:
        return iter(self._posts)

    @property
    def posts(self) -> Tuple[Post, ...]:
        return self._posts

    def categories(self) -> List[str]:
        """Distinct, case-sensitive category names sorted ascending."""
        return sorted({post.category for post in self._posts if post.category})

    def has_category(self, name: str) -> bool:
        return any(post.category == name for post in self._posts)

    def posts_in(self, category: str) -> List[Post]:
        """Posts of one category in display order."""
        matching = [post for post in self._posts if post.category == category]
        return sorted(matching, key=Post.sort_key)

    def titles_in(self, category: str) -> List[str]:
        return [post.title for post in self.posts_in(category)]

    # Loaders

    @classmethod
    def from_directory(cls, root: Union[str, Path], posts_dir: str = POSTS_ROOT) -> 'ContentIndex':
        """Index every ``*.md`` file below ``<root>/<posts_dir>``."""
        root = Path(root)
        base = root / posts_dir
        if not base.is_dir():
            raise ContentError(f"posts directory not found: {base}")

        posts = []
        for md_file in sorted(base.rglob('*.md')):
            relative = md_file.relative_to(root).as_posix()
            try:
                text = md_file.read_text(encoding='utf-8-sig')
            except OSError as e:
                raise ContentError(f"cannot read {md_file}: {e}")

            try:
                front_matter, _ = split_front_matter(text)
                post = Post.from_mapping(front_matter, path=relative, posts_root=posts_dir)
            except ContentError as e:
                raise ContentError(f"{relative}: {e}")

            if post.category is None:
                logger.debug("Skipping uncategorized post %s", relative)
                continue
            posts.append(post)

        logger.info("Indexed %d posts from %s", len(posts), base)
        return cls(posts)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> 'ContentIndex':
        """
        Load a manifest: either a list of post objects or ``{"posts": [...]}``.
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as e:
            raise ContentError(f"cannot read {path}: {e}")
        except json.JSONDecodeError as e:
            raise ContentError(f"invalid JSON in {path}: {e}")

        if isinstance(data, dict):
            data = data.get('posts', [])
        if not isinstance(data, list):
            raise ContentError(f"{path}: expected a list of posts")

        posts = [Post.from_mapping(entry) for entry in data]
        logger.info("Loaded %d posts from %s", len(posts), path)
        return cls(posts)

    @classmethod
    def load(cls, source: Union[str, Path]) -> 'ContentIndex':
        """Pick a loader for ``source`` based on whether it is a directory."""
        source = Path(source)
        if source.is_dir():
            return cls.from_directory(source)
        if source.suffix == '.json':
            return cls.from_json(source)
        raise ContentError(f"unsupported content source: {source}")

    @classmethod
    def sample(cls) -> 'ContentIndex':
        """The posts shipped with the site before any real content exists."""
        return cls(Post.from_mapping(entry) for entry in SAMPLE_POSTS)


SAMPLE_POSTS: List[Dict[str, Any]] = [
    {'title': 'XSS-Attacks.md', 'category': 'web-security', 'date': '2024-03-20'},
    {'title': 'SQL-Injection.md', 'category': 'web-security', 'date': '2024-03-15'},
    {'title': 'Network-Scanning.md', 'category': 'network-security', 'date': '2024-03-18'},
    {'title': 'Firewall-Config.md', 'category': 'network-security', 'date': '2024-03-10'},
    {'title': 'Ransomware-Analysis.md', 'category': 'malware-analysis', 'date': '2024-03-12'},
    {'title': 'Trojan-Investigation.md', 'category': 'malware-analysis', 'date': '2024-03-05'},
    {'title': 'HackTheBox-Writeup.md', 'category': 'ctf-writeups', 'date': '2024-03-19'},
    {'title': 'TryHackMe-Walkthrough.md', 'category': 'ctf-writeups', 'date': '2024-03-14'},
]
