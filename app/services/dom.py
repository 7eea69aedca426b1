"""Small typed helpers over BeautifulSoup nodes.

BeautifulSoup returns ``None`` for missing nodes and a list for multi-valued
attributes such as ``class``; these helpers give every caller plain strings
and ``Optional[Tag]`` results instead.
"""

from typing import Iterable, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


def text_of(node: Optional[Tag]) -> str:
    """Return the whitespace-collapsed text of *node*, or ``""``."""
    if node is None:
        return ""
    return " ".join(node.get_text(" ").split())


def attr(node: Optional[Tag], name: str) -> str:
    """Return attribute *name* of *node* as a string (``""`` when absent)."""
    if node is None:
        return ""
    value = node.get(name)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def select_first(node: Optional[Tag], selector: str) -> Optional[Tag]:
    if node is None:
        return None
    return node.select_one(selector)


def parent_tag(node: Tag) -> Optional[Tag]:
    """Return the parent element, or ``None`` at the document root."""
    parent = node.parent
    if parent is None or isinstance(parent, BeautifulSoup):
        return None
    return parent


def has_ancestor(node: Tag, names: Iterable[str], stop: Optional[Tag] = None) -> bool:
    """Return True when *node* or one of its ancestors is one of *names*.

    The walk ends before *stop*, so an element inside ``<footer>`` still
    counts as footer content when *stop* is that footer.
    """
    names = set(names)
    current: Optional[Tag] = node
    while current is not None and current is not stop:
        if current.name in names:
            return True
        current = parent_tag(current)
    return False


def body_of(soup: BeautifulSoup) -> Tag:
    return soup.body or soup
