"""Parse markdown into a ProseMirror-style document tree.

markdown-it-py produces a flat token stream; this module folds it into
nested dicts (``type``/``content``/``attrs``/``text``/``marks``) where
inline formatting travels as marks on text leaves, so text nodes never nest.
"""

from __future__ import annotations

from functools import lru_cache

from markdown_it import MarkdownIt
from markdown_it.rules_inline import StateInline
from markdown_it.token import Token

from .wikilinks import WIKILINK_RE

_CONTAINER_TYPES = {
    "paragraph_open": "paragraph",
    "heading_open": "heading",
    "bullet_list_open": "bulletList",
    "ordered_list_open": "orderedList",
    "list_item_open": "listItem",
    "blockquote_open": "blockquote",
    "table_open": "table",
    "thead_open": "tableHead",
    "tbody_open": "tableBody",
    "tr_open": "tableRow",
    "th_open": "tableHeader",
    "td_open": "tableCell",
}

_MARK_TYPES = {
    "em": "italic",
    "strong": "bold",
    "s": "strike",
    "link": "link",
}


def _wikilink_rule(state: StateInline, silent: bool) -> bool:
    # A whole [[...]] stays one text token; nothing inside it is parsed as markdown.
    match = WIKILINK_RE.match(state.src, state.pos, state.posMax)
    if match is None:
        return False
    if not silent:
        token = state.push("text", "", 0)
        token.content = match.group(0)
    state.pos = match.end()
    return True


def wikilinks_plugin(md: MarkdownIt) -> None:
    """Register the ``[[...]]`` inline rule ahead of markdown links."""
    md.inline.ruler.before("link", "wikilink", _wikilink_rule)


@lru_cache(maxsize=1)
def _default_parser() -> MarkdownIt:
    md = MarkdownIt("commonmark").enable("table").enable("strikethrough")
    md.use(wikilinks_plugin)
    return md


def markdown_to_tree(text: str, md: MarkdownIt | None = None) -> dict:
    """Parse markdown text into a ``doc`` node."""
    parser = md or _default_parser()
    doc: dict = {"type": "doc", "content": []}
    stack: list[dict] = [doc]

    for token in parser.parse(text):
        if token.nesting == 1:
            node = _open_container(token)
            stack[-1]["content"].append(node)
            stack.append(node)
        elif token.nesting == -1:
            if len(stack) > 1:
                stack.pop()
        elif token.type == "inline":
            stack[-1]["content"].extend(_inline_nodes(token.children or []))
        else:
            leaf = _leaf_block(token)
            if leaf is not None:
                stack[-1]["content"].append(leaf)

    return doc


def _open_container(token: Token) -> dict:
    node_type = _CONTAINER_TYPES.get(token.type, token.type.removesuffix("_open"))
    node: dict = {"type": node_type, "content": []}

    match node_type:
        case "heading":
            node["attrs"] = {"level": int(token.tag[1])}
        case "orderedList":
            node["attrs"] = {"start": int(token.attrGet("start") or 1)}
        case "paragraph":
            node["attrs"] = {"tight": bool(token.hidden)}
        case "tableHeader" | "tableCell":
            style = str(token.attrGet("style") or "")
            align = style.split(":", 1)[1].strip() if ":" in style else None
            node["attrs"] = {"align": align}

    return node


def _leaf_block(token: Token) -> dict | None:
    match token.type:
        case "fence":
            info = token.info.strip()
            language = info.split()[0] if info else ""
            return {"type": "codeBlock", "attrs": {"language": language}, "text": token.content}
        case "code_block":
            return {"type": "codeBlock", "attrs": {"language": ""}, "text": token.content}
        case "hr":
            return {"type": "horizontalRule"}
        case "html_block":
            return {"type": "htmlBlock", "text": token.content}
    return None


def _with_marks(node: dict, marks: list[dict]) -> dict:
    if marks:
        node["marks"] = [dict(m) for m in marks]
    return node


def _pop_mark(marks: list[dict], mark_type: str) -> None:
    for i in range(len(marks) - 1, -1, -1):
        if marks[i]["type"] == mark_type:
            del marks[i]
            return


def _inline_nodes(children: list[Token]) -> list[dict]:
    nodes: list[dict] = []
    marks: list[dict] = []

    for child in children:
        kind = child.type
        base = kind.rsplit("_", 1)[0]

        if kind.endswith("_open") and base in _MARK_TYPES:
            mark: dict = {"type": _MARK_TYPES[base]}
            if base == "link":
                mark["attrs"] = {
                    "href": child.attrGet("href") or "",
                    "title": child.attrGet("title"),
                }
            marks.append(mark)
            continue
        if kind.endswith("_close") and base in _MARK_TYPES:
            _pop_mark(marks, _MARK_TYPES[base])
            continue

        match kind:
            case "text" | "text_special":
                if not child.content:
                    continue
                # Adjacent plain text is merged so one run scans as one string
                if (
                    nodes
                    and nodes[-1]["type"] == "text"
                    and nodes[-1].get("marks", []) == marks
                ):
                    nodes[-1]["text"] += child.content
                else:
                    nodes.append(_with_marks({"type": "text", "text": child.content}, marks))
            case "code_inline":
                nodes.append(_with_marks({"type": "inlineCode", "text": child.content}, marks))
            case "softbreak":
                nodes.append({"type": "softBreak"})
            case "hardbreak":
                nodes.append({"type": "hardBreak"})
            case "image":
                nodes.append(_with_marks({
                    "type": "image",
                    "attrs": {
                        "src": child.attrGet("src") or "",
                        "alt": child.content,
                        "title": child.attrGet("title"),
                    },
                }, marks))
            case "html_inline":
                nodes.append({"type": "htmlInline", "text": child.content})

    return nodes
