"""Render a document tree to HTML.

Handles every node type produced by ``tree.markdown_to_tree`` plus the two
leaves added by the wikilink engine: ``internalLink`` and ``markedText``.
"""

from __future__ import annotations

from html import escape

_INLINE_TYPES = {
    "text", "inlineCode", "image", "hardBreak", "softBreak",
    "htmlInline", "internalLink", "markedText",
}


def render_html(doc: dict) -> str:
    """Render a ``doc`` node (or any block node) to an HTML fragment."""
    if not doc or not isinstance(doc, dict):
        return ""
    if doc.get("type") == "doc":
        return _render_blocks(doc.get("content", []))
    return _render_block(doc)


def _attr(value: object) -> str:
    return escape(str(value), quote=True)


def _render_blocks(nodes: list[dict]) -> str:
    return "".join(_render_block(node) for node in nodes)


def _render_block(node: dict) -> str:
    node_type = node.get("type", "")
    content = node.get("content", [])
    attrs = node.get("attrs", {})

    match node_type:
        case "paragraph":
            text = _render_inline(content)
            if attrs.get("tight"):
                return text
            return f"<p>{text}</p>\n"

        case "heading":
            level = attrs.get("level", 1)
            return f"<h{level}>{_render_inline(content)}</h{level}>\n"

        case "bulletList":
            return f"<ul>\n{_render_blocks(content)}</ul>\n"

        case "orderedList":
            start = attrs.get("start", 1)
            start_attr = f' start="{start}"' if start != 1 else ""
            return f"<ol{start_attr}>\n{_render_blocks(content)}</ol>\n"

        case "listItem":
            return f"<li>{_render_blocks(content)}</li>\n"

        case "blockquote":
            return f"<blockquote>\n{_render_blocks(content)}</blockquote>\n"

        case "codeBlock":
            lang = attrs.get("language", "")
            cls = f' class="language-{_attr(lang)}"' if lang else ""
            return f"<pre><code{cls}>{escape(node.get('text', ''), quote=False)}</code></pre>\n"

        case "horizontalRule":
            return "<hr />\n"

        case "htmlBlock":
            return node.get("text", "")

        case "table":
            return f"<table>\n{_render_blocks(content)}</table>\n"

        case "tableHead":
            return f"<thead>\n{_render_blocks(content)}</thead>\n"

        case "tableBody":
            return f"<tbody>\n{_render_blocks(content)}</tbody>\n"

        case "tableRow":
            return f"<tr>\n{_render_blocks(content)}</tr>\n"

        case "tableHeader" | "tableCell":
            tag = "th" if node_type == "tableHeader" else "td"
            align = attrs.get("align")
            style = f' style="text-align:{_attr(align)}"' if align else ""
            return f"<{tag}{style}>{_render_inline(content)}</{tag}>\n"

        case _:
            # Inline node at block level, or an unknown container
            if "text" in node or node_type in _INLINE_TYPES:
                return _render_inline([node])
            return _render_blocks(content)


def _render_inline(nodes: list[dict]) -> str:
    parts: list[str] = []
    for node in nodes:
        node_type = node.get("type", "")
        if node_type in _INLINE_TYPES:
            parts.append(_render_leaf(node))
        else:
            # Block-level node inside inline context
            parts.append(_render_inline(node.get("content", [])))
    return "".join(parts)


def _render_leaf(node: dict) -> str:
    node_type = node.get("type", "")
    attrs = node.get("attrs", {})
    marks = node.get("marks", [])

    match node_type:
        case "text":
            html = escape(node.get("text", ""), quote=False)
        case "inlineCode":
            html = f"<code>{escape(node.get('text', ''), quote=False)}</code>"
        case "hardBreak":
            return "<br />\n"
        case "softBreak":
            return "\n"
        case "htmlInline":
            return node.get("text", "")
        case "image":
            title = attrs.get("title")
            title_attr = f' title="{_attr(title)}"' if title else ""
            html = (
                f'<img src="{_attr(attrs.get("src", ""))}" '
                f'alt="{_attr(attrs.get("alt", ""))}"{title_attr} />'
            )
        case "internalLink":
            html = (
                f'<a class="internal-link" href="{_attr(attrs.get("href", ""))}">'
                f"{escape(node.get('text', ''), quote=False)}</a>"
            )
            # An enclosing markdown link would nest anchors
            marks = [m for m in marks if m.get("type") != "link"]
        case "markedText":
            html = (
                f'<span class="{_attr(attrs.get("styleTag", ""))}">'
                f"{escape(node.get('text', ''), quote=False)}</span>"
            )
        case _:
            return ""

    return _apply_marks(html, marks)


def _apply_marks(html: str, marks: list[dict]) -> str:
    # Innermost mark is the last one opened
    for mark in reversed(marks):
        match mark.get("type", ""):
            case "bold":
                html = f"<strong>{html}</strong>"
            case "italic":
                html = f"<em>{html}</em>"
            case "strike":
                html = f"<s>{html}</s>"
            case "code":
                html = f"<code>{html}</code>"
            case "link":
                link_attrs = mark.get("attrs", {})
                title = link_attrs.get("title")
                title_attr = f' title="{_attr(title)}"' if title else ""
                html = f'<a href="{_attr(link_attrs.get("href", ""))}"{title_attr}>{html}</a>'
    return html
