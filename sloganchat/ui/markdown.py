"""Markdown to HTML conversion for chat bubbles.

Supports: fenced code blocks, inline code, headings, bold, italic, links,
and bulleted/numbered lists. Input may be a reply that is still streaming,
so unbalanced syntax must never raise; an unclosed code fence renders as a
code block running to the end of the text.
"""

import re

_CODE_BLOCK = re.compile(r"```([\w+-]*)\n?([\s\S]*?)(?:```|\Z)")
_INLINE_CODE = re.compile(r"`([^`\n]+)`")
_HEADING = re.compile(r"^(#{1,6})\s+(.+)$", re.MULTILINE)
_LINK = re.compile(r"\[([^\]]+)\]\(([^)\s]+)\)")
_SAFE_URL = re.compile(r"(?:https?://|mailto:)", re.IGNORECASE)
_PLACEHOLDER = re.compile(r"\x00(\d+)\x00")

_PRE_CLASSES = "bg-gray-800 text-gray-100 rounded-lg p-3 my-2 overflow-x-auto text-xs"
_CODE_CLASSES = "bg-gray-200 text-pink-600 px-1.5 py-0.5 rounded text-xs"


def _escape(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _code_block(match: re.Match) -> str:
    language = match.group(1)
    lang_attr = f' class="language-{language}"' if language else ""
    # Newlines inside code survive the final <br> pass as literal line breaks.
    body = match.group(2).replace("\n", "&#10;")
    return f'<pre class="{_PRE_CLASSES}"><code{lang_attr}>{body}</code></pre>'


def _link(match: re.Match) -> str:
    label, url = match.group(1), match.group(2)
    if not _SAFE_URL.match(url):
        return label
    return f'<a href="{url}" class="text-blue-600 underline" target="_blank">{label}</a>'


def _lists(text: str, marker: str, tag: str, classes: str) -> str:
    pattern = re.compile(marker)
    result: list[str] = []
    in_list = False
    for line in text.split("\n"):
        stripped = line.strip()
        if pattern.match(stripped):
            if not in_list:
                result.append(f'<{tag} class="{classes}">')
                in_list = True
            result.append(f"<li>{pattern.sub('', stripped, count=1)}</li>")
            continue
        if in_list:
            result.append(f"</{tag}>")
            in_list = False
        result.append(line)
    if in_list:
        result.append(f"</{tag}>")
    return "\n".join(result)


def markdown_to_html(text: str) -> str:
    """Convert markdown to HTML for chat display.

    Code is swapped out for placeholders before the inline passes run, so
    markup characters inside code stay literal.
    """
    code: list[str] = []

    def stash(html: str) -> str:
        code.append(html)
        return f"\x00{len(code) - 1}\x00"

    text = _escape(text.replace("\x00", ""))

    text = _CODE_BLOCK.sub(lambda m: stash(_code_block(m)), text)
    text = _INLINE_CODE.sub(
        lambda m: stash(f'<code class="{_CODE_CLASSES}">{m.group(1)}</code>'), text
    )

    text = _HEADING.sub(
        lambda m: f'<h{len(m.group(1))} class="font-semibold my-1">{m.group(2)}</h{len(m.group(1))}>',
        text,
    )

    # Bold before italic so ** is not read as two *
    text = re.sub(r"\*\*(.+?)\*\*", r"<strong>\1</strong>", text)
    text = re.sub(r"__(.+?)__", r"<strong>\1</strong>", text)
    text = re.sub(r"(?<![\w*])\*([^*\n]+)\*(?![\w*])", r"<em>\1</em>", text)
    text = re.sub(r"(?<![\w_])_([^_\n]+)_(?![\w_])", r"<em>\1</em>", text)

    text = _LINK.sub(_link, text)

    text = _lists(text, r"^[-*]\s+", "ul", "list-disc list-inside my-2 space-y-1")
    text = _lists(text, r"^\d+\.\s+", "ol", "list-decimal list-inside my-2 space-y-1")

    text = text.replace("\n", "<br>")
    return _PLACEHOLDER.sub(lambda m: code[int(m.group(1))], text)
