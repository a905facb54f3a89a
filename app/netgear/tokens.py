"""
Turns the status page markup into a flat, forward-only stream of tokens.

The router serves sloppy HTML so we let BeautifulSoup repair what it can and then walk the
resulting tree, emitting a start tag, the children and an end tag for every element.
The parser downstream never sees the tree, just the tokens.
"""

from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping, NamedTuple

import structlog
from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

log = structlog.get_logger(__name__)


class TokenKind(Enum):
    START_TAG = "start_tag"
    END_TAG = "end_tag"
    TEXT = "text"
    END = "end"


class Token(NamedTuple):
    kind: TokenKind
    # Tag name for START_TAG/END_TAG, raw text for TEXT, empty for END
    data: str = ""
    attrs: Mapping[str, str] = MappingProxyType({})


END_TOKEN = Token(TokenKind.END)


def iter_tokens(markup: str) -> Iterator[Token]:
    """Lazily yield the tokens for `markup`, always finishing with a single END token.

    Never raises on bad markup; whatever BeautifulSoup can't make sense of ends up as text or is dropped.
    Call again to start over; the iterator itself can only be consumed once.
    """
    # multi_valued_attributes=None keeps `class` as the literal attribute string instead of a list
    soup = BeautifulSoup(markup or "", "html.parser", multi_valued_attributes=None)
    yield from _walk(soup)
    yield END_TOKEN


def _walk(root: Tag) -> Iterator[Token]:
    # Explicit stack instead of recursion; unclosed tags on a bad page nest arbitrarily deep
    stack = [(root, iter(root.children))]
    while stack:
        element, children = stack[-1]
        child = next(children, None)
        if child is None:
            stack.pop()
            if element is not root:
                yield Token(TokenKind.END_TAG, element.name)
            continue

        if isinstance(child, Tag):
            # html.parser already lowercases tag and attribute names
            attrs = {k: v if isinstance(v, str) else " ".join(v) for k, v in child.attrs.items()}
            yield Token(TokenKind.START_TAG, child.name, attrs)
            stack.append((child, iter(child.children)))
        # Comments, doctypes, CDATA ... etc are not content
        elif isinstance(child, PreformattedString):
            log.debug("Skipping non-content string", kind=type(child).__name__)
        elif isinstance(child, NavigableString):
            yield Token(TokenKind.TEXT, str(child))
