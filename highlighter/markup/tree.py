"""Low-level tree surgery on BeautifulSoup documents.

bs4 compares tags structurally with ``==``, so every identity check in this
module uses ``is`` or ``id()``.
"""

import logging
from typing import Optional

from bs4 import BeautifulSoup, NavigableString, PageElement, Tag

from ..constants import SPLIT_ATTR
from ..errors import MaterializeError
from ..models import TextSegment

logger = logging.getLogger(__name__)

# Elements that cannot be split in two around a marker boundary
STRUCTURAL_TAGS = {
    "table", "thead", "tbody", "tfoot", "tr", "td", "th", "caption",
    "colgroup", "col", "ul", "ol", "dl", "li", "dt", "dd",
    "select", "optgroup", "option",
}

# Elements whose children cannot be regrouped under an inline wrapper
CONTAINER_TAGS = {
    "table", "thead", "tbody", "tfoot", "tr", "colgroup",
    "ul", "ol", "dl", "select", "optgroup",
}


class PartialBoundaryError(ValueError):
    """The boundary partially covers an element, so it cannot be wrapped in place."""


def owner_document(node: PageElement) -> Optional[BeautifulSoup]:
    """Return the BeautifulSoup object a node is attached to."""
    if isinstance(node, BeautifulSoup):
        return node
    for parent in node.parents:
        if isinstance(parent, BeautifulSoup):
            return parent
    return None


def ensure_piece_boundary(segment: TextSegment, raw_offset: int) -> int:
    """
    Make sure a segment piece starts exactly at ``raw_offset``.

    Splits the live leaf holding that offset into two adjacent strings when
    needed and records the new piece.

    Args:
        segment: Segment whose leaf may be split.
        raw_offset: Offset into ``segment.raw_text``.

    Returns:
        Index of the piece starting at ``raw_offset`` (``len(pieces)`` when
        the offset is the end of the raw text).

    Raises:
        MaterializeError: If the leaf was detached or changed outside the
            pipeline.
    """
    if raw_offset >= len(segment.raw_text):
        return len(segment.pieces)

    index = segment.piece_index_at(raw_offset)
    piece_start, piece_end = segment.piece_bounds(index)
    if raw_offset == piece_start:
        return index

    node = segment.pieces[index][1]
    if node.parent is None or str(node) != segment.raw_text[piece_start:piece_end]:
        raise MaterializeError("Text leaf was modified outside the annotation pipeline")

    cut = raw_offset - piece_start
    text = str(node)
    left = NavigableString(text[:cut])
    right = NavigableString(text[cut:])
    node.replace_with(left)
    left.insert_after(right)

    segment.pieces[index] = (piece_start, left)
    segment.pieces.insert(index + 1, (raw_offset, right))
    return index + 1


def common_ancestor(first: PageElement, last: PageElement) -> Optional[Tag]:
    """Lowest tag containing both nodes."""
    first_ancestors = {id(parent) for parent in first.parents}
    for parent in last.parents:
        if id(parent) in first_ancestors:
            return parent
    return None


def ancestors_below(node: PageElement, ancestor: Tag) -> list[Tag]:
    """Ancestors of ``node`` strictly below ``ancestor``, nearest first."""
    chain = []
    parent = node.parent
    while parent is not None and parent is not ancestor:
        chain.append(parent)
        parent = parent.parent
    return chain


def check_surroundable(first: PageElement, last: PageElement) -> Tag:
    """
    Check that the nodes from ``first`` to ``last`` are siblings.

    Returns:
        Their parent.

    Raises:
        PartialBoundaryError: If the boundary partially covers an element.
        MaterializeError: If a node is detached.
    """
    if first.parent is None or last.parent is None:
        raise MaterializeError("Boundary node is detached from the tree")
    if first.parent is not last.parent:
        raise PartialBoundaryError("Boundary partially selects an element")
    return first.parent


def check_extractable(first: PageElement, last: PageElement) -> Tag:
    """
    Check that partially covered elements can be split for extraction.

    Returns:
        The common ancestor the extracted fragment will be reinserted into.

    Raises:
        MaterializeError: If there is no common ancestor or a structural
            element would have to be split or regrouped.
    """
    ancestor = common_ancestor(first, last)
    if ancestor is None:
        raise MaterializeError("Boundary nodes share no common ancestor")
    if ancestor.name in CONTAINER_TAGS:
        raise MaterializeError(f"Cannot regroup children of <{ancestor.name}>")

    for tag in ancestors_below(first, ancestor) + ancestors_below(last, ancestor):
        if tag.name in STRUCTURAL_TAGS:
            raise MaterializeError(f"Cannot split <{tag.name}> across a marker boundary")
    return ancestor


def siblings_between(first: PageElement, last: PageElement) -> list[PageElement]:
    """Nodes from ``first`` through ``last`` following next_sibling links."""
    nodes = []
    node = first
    while node is not None:
        nodes.append(node)
        if node is last:
            return nodes
        node = node.next_sibling
    raise MaterializeError("Boundary end is not a following sibling of its start")


def surround_contents(first: PageElement, last: PageElement, wrapper: Tag) -> Tag:
    """Wrap the sibling run ``first``..``last`` in ``wrapper`` in place."""
    check_surroundable(first, last)
    nodes = siblings_between(first, last)
    first.insert_before(wrapper)
    for node in nodes:
        wrapper.append(node)
    return wrapper


def _split_token_list(tag: Tag) -> list[str]:
    value = tag.get(SPLIT_ATTR)
    if not value:
        return []
    return str(value).split()


def add_split_token(tag: Tag, token: str) -> None:
    tokens = _split_token_list(tag)
    if token not in tokens:
        tokens.append(token)
    tag[SPLIT_ATTR] = " ".join(tokens)


def remove_split_token(tag: Tag, token: str) -> None:
    tokens = [t for t in _split_token_list(tag) if t != token]
    if tokens:
        tag[SPLIT_ATTR] = " ".join(tokens)
    elif tag.has_attr(SPLIT_ATTR):
        del tag[SPLIT_ATTR]


def shallow_clone(soup: BeautifulSoup, tag: Tag) -> Tag:
    """New empty tag with the same name and attributes, minus split tokens."""
    attrs = {}
    for key, value in tag.attrs.items():
        if key == SPLIT_ATTR:
            continue
        attrs[key] = list(value) if isinstance(value, list) else value
    return soup.new_tag(tag.name, attrs=attrs)


def extract_contents(
    soup: BeautifulSoup,
    first: PageElement,
    last: PageElement,
    token_prefix: str,
) -> tuple[Tag, int, list[PageElement]]:
    """
    Detach everything from ``first`` through ``last`` as a fragment.

    Partially covered ancestors below the common ancestor are split in two;
    both halves get a ``{token_prefix}:{n}`` split token so the split can be
    undone later by ``merge_split_elements``.

    Returns:
        (common ancestor, insertion position, detached fragment nodes)
    """
    ancestor = check_extractable(first, last)
    counter = 0

    # Start side: move the covered tail of each ancestor into a clone
    node = first
    while node.parent is not ancestor:
        parent = node.parent
        if node.previous_sibling is not None:
            clone = shallow_clone(soup, parent)
            parent.insert_after(clone)
            for moving in [node] + list(node.next_siblings):
                clone.append(moving)
            token = f"{token_prefix}:{counter}"
            counter += 1
            add_split_token(parent, token)
            add_split_token(clone, token)
            node = clone
        else:
            node = parent
    first_top = node

    # End side: move the uncovered tail of each ancestor into a clone
    node = last
    while node.parent is not ancestor:
        parent = node.parent
        if node.next_sibling is not None:
            clone = shallow_clone(soup, parent)
            parent.insert_after(clone)
            for moving in list(node.next_siblings):
                clone.append(moving)
            token = f"{token_prefix}:{counter}"
            counter += 1
            add_split_token(parent, token)
            add_split_token(clone, token)
        node = parent
    last_top = node

    nodes = siblings_between(first_top, last_top)
    position = ancestor.index(first_top)
    for fragment_node in nodes:
        fragment_node.extract()
    return ancestor, position, nodes


def merge_split_elements(root: Tag, prefixes: set[str]) -> int:
    """
    Re-join element halves created by ``extract_contents``.

    Halves are merged only when they are still adjacent siblings; tokens of
    halves that were separated by outside changes are just removed.

    Args:
        root: Region to search.
        prefixes: Token prefixes (marker ids) whose splits should be undone.

    Returns:
        Number of merged pairs.
    """
    merged = 0
    progress = True
    while progress:
        progress = False
        groups: dict[str, list[Tag]] = {}
        for tag in root.find_all(attrs={SPLIT_ATTR: True}):
            for token in _split_token_list(tag):
                if token.rsplit(":", 1)[0] in prefixes:
                    groups.setdefault(token, []).append(tag)

        for token, tags in groups.items():
            if len(tags) != 2:
                continue
            left, right = tags
            if left.next_sibling is not right:
                continue
            for child in list(right.contents):
                left.append(child)
            for other in _split_token_list(right):
                if other != token:
                    add_split_token(left, other)
            remove_split_token(left, token)
            right.decompose()
            merged += 1
            progress = True
            break

    # Whatever is left could not be re-joined
    for tag in root.find_all(attrs={SPLIT_ATTR: True}):
        for token in _split_token_list(tag):
            if token.rsplit(":", 1)[0] in prefixes:
                logger.debug(f"Split halves for {token} are no longer adjacent")
                remove_split_token(tag, token)

    return merged
