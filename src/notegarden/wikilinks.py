"""Wikilink engine: resolve [[Title]] tokens in a document tree into links."""

from __future__ import annotations

import re
from urllib.parse import quote

from .aliases import AliasIndex, normalize_alias
from .models import LinkToken, ResolvedLink, RewriteResult, UnresolvedMarker

# Non-greedy per occurrence: the inner text can never contain "]"
WIKILINK_RE = re.compile(r"\[\[([^\]]+)\]\]")

DEFAULT_BROKEN_CLASS = "broken-link"


def find_link_tokens(text: str) -> list[LinkToken]:
    """Return every [[...]] token in text, left to right, non-overlapping."""
    return [
        LinkToken(raw=m.group(1), start=m.start(), end=m.end())
        for m in WIKILINK_RE.finditer(text)
    ]


def resolve_link(raw: str, alias_index: AliasIndex) -> RewriteResult:
    """Look up a token's inner text. A miss is a normal result, never an error."""
    target = alias_index.get(normalize_alias(raw))
    if target is None:
        return UnresolvedMarker(display_text=raw)
    return ResolvedLink(target_id=target, display_text=raw)


def _text_node(text: str, marks: list[dict] | None) -> dict:
    node: dict = {"type": "text", "text": text}
    if marks:
        node["marks"] = list(marks)
    return node


def _result_node(
    result: RewriteResult,
    marks: list[dict] | None,
    link_prefix: str,
    link_suffix: str,
    broken_class: str,
) -> dict:
    match result:
        case ResolvedLink(target_id=target_id, display_text=display):
            node: dict = {
                "type": "internalLink",
                "text": display,
                "attrs": {
                    "href": f"{link_prefix}{quote(target_id)}{link_suffix}",
                    "target": target_id,
                },
            }
        case UnresolvedMarker(display_text=display):
            node = {
                "type": "markedText",
                "text": display,
                "attrs": {"styleTag": broken_class},
            }
    if marks:
        node["marks"] = list(marks)
    return node


def split_text_node(
    node: dict,
    alias_index: AliasIndex,
    *,
    link_prefix: str = "/",
    link_suffix: str = "",
    broken_class: str = DEFAULT_BROKEN_CLASS,
) -> list[dict]:
    """Split one text node around its wikilinks.

    Returns ``[node]`` (the same object) when the text holds no tokens,
    otherwise the replacement run of sibling nodes in source order.
    """
    text = node.get("text", "")
    tokens = find_link_tokens(text)
    if not tokens:
        return [node]

    marks = node.get("marks")
    parts: list[dict] = []
    pos = 0
    for token in tokens:
        if token.start > pos:
            parts.append(_text_node(text[pos:token.start], marks))
        result = resolve_link(token.raw, alias_index)
        parts.append(_result_node(result, marks, link_prefix, link_suffix, broken_class))
        pos = token.end
    if pos < len(text):
        parts.append(_text_node(text[pos:], marks))
    return parts


def _rewrite_children(
    children: list[dict],
    alias_index: AliasIndex,
    link_prefix: str,
    link_suffix: str,
    broken_class: str,
) -> list[dict]:
    changed = False
    out: list[dict] = []
    for child in children:
        if child.get("type") == "text":
            replacement = split_text_node(
                child,
                alias_index,
                link_prefix=link_prefix,
                link_suffix=link_suffix,
                broken_class=broken_class,
            )
            if len(replacement) != 1 or replacement[0] is not child:
                changed = True
            out.extend(replacement)
        else:
            new_child = _rewrite_node(child, alias_index, link_prefix, link_suffix, broken_class)
            if new_child is not child:
                changed = True
            out.append(new_child)
    return out if changed else children


def _rewrite_node(
    node: dict,
    alias_index: AliasIndex,
    link_prefix: str,
    link_suffix: str,
    broken_class: str,
) -> dict:
    content = node.get("content")
    if not content:
        return node
    new_content = _rewrite_children(content, alias_index, link_prefix, link_suffix, broken_class)
    if new_content is content:
        return node
    return {**node, "content": new_content}


def rewrite_links(
    tree: dict,
    alias_index: AliasIndex,
    *,
    link_prefix: str = "/",
    link_suffix: str = "",
    broken_class: str = DEFAULT_BROKEN_CLASS,
) -> dict:
    """Return a copy of tree with every [[...]] token resolved.

    The input tree and the index are left untouched. Containers whose
    children did not change are shared with the input.
    """
    return _rewrite_node(tree, alias_index, link_prefix, link_suffix, broken_class)


def plain_text(nodes: list[dict], *, with_brackets: bool = False) -> str:
    """Concatenate the text of a run of inline nodes.

    With ``with_brackets`` the link leaves are re-wrapped in [[ ]], which
    reproduces the string the run was split from.
    """
    parts: list[str] = []
    for node in nodes:
        text = node.get("text", "")
        if with_brackets and node.get("type") in ("internalLink", "markedText"):
            text = f"[[{text}]]"
        parts.append(text)
    return "".join(parts)


def collect_broken_links(tree: dict) -> list[str]:
    """Display texts of every unresolved link in tree, in document order."""
    found: list[str] = []
    stack = [tree]
    while stack:
        node = stack.pop()
        if node.get("type") == "markedText":
            found.append(node.get("text", ""))
        stack.extend(reversed(node.get("content", [])))
    return found
