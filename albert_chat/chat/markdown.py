"""Reply text processing: related-topic split and markdown rendering."""

import re

RELATED_TOPICS_MARKER = "RELATED_TOPICS:"

_TOPIC_SEPARATORS = re.compile(r"[|\n]")
_TOPIC_BULLET = re.compile(r"^(?:[-*•]|\d+[.)])\s*")
_SAFE_LINK = re.compile(r"(?:https?://|mailto:)", re.IGNORECASE)


def split_related_topics(text: str) -> tuple[str, list[str]]:
    """Split a reply into its body and suggested follow-up topics.

    Everything before the first ``RELATED_TOPICS:`` marker is the body.
    Topics after it are separated by ``|`` or newlines; list bullets are
    dropped.

    Returns:
        The trimmed body and the list of non-empty topics.
    """
    body, marker, tail = text.partition(RELATED_TOPICS_MARKER)
    if not marker:
        return text.strip(), []

    topics = []
    for part in _TOPIC_SEPARATORS.split(tail.split(RELATED_TOPICS_MARKER)[0]):
        topic = _TOPIC_BULLET.sub("", part.strip()).strip()
        if topic:
            topics.append(topic)
    return body.strip(), topics


def _render_lists(text: str, pattern: str, tag: str, classes: str) -> str:
    lines = text.split("\n")
    in_list = False
    result = []
    for line in lines:
        stripped = line.strip()
        if re.match(pattern, stripped):
            if not in_list:
                result.append(f'<{tag} class="{classes}">')
                in_list = True
            item = re.sub(pattern, "", stripped)
            result.append(f"<li>{item}</li>")
        else:
            if in_list:
                result.append(f"</{tag}>")
                in_list = False
            result.append(line)
    if in_list:
        result.append(f"</{tag}>")
    return "\n".join(result)


def markdown_to_html(text: str) -> str:
    """Convert markdown to HTML for chat display.

    Supports: headings, bold, italic, inline code, code blocks, links, lists.
    Links always open in a new tab without opener or referrer.
    """
    # Escape HTML entities first
    text = (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )

    # Code blocks (```code```)
    text = re.sub(
        r"```(\w*)\n?([\s\S]*?)```",
        r'<pre class="bg-gray-800 text-gray-100 rounded-lg p-3 my-2 overflow-x-auto text-sm"><code>\2</code></pre>',
        text,
    )

    # Inline code (`code`)
    text = re.sub(
        r"`([^`]+)`",
        r'<code class="bg-gray-200 text-pink-600 px-1.5 py-0.5 rounded text-sm">\1</code>',
        text,
    )

    # Headings (# to ###)
    text = re.sub(
        r"^(#{1,3})\s+(.+)$",
        lambda m: f'<h{len(m.group(1)) + 2} class="font-semibold my-2">{m.group(2)}</h{len(m.group(1)) + 2}>',
        text,
        flags=re.MULTILINE,
    )

    # Links [text](url); set aside until emphasis is done so URLs stay intact.
    # Other schemes (javascript:, data:, relative paths) stay plain text.
    links: list[str] = []

    def _stash_link(match: re.Match[str]) -> str:
        if not _SAFE_LINK.match(match.group(2)):
            return match.group(0)
        links.append(
            f'<a href="{match.group(2)}" class="text-blue-600 hover:text-blue-800 underline" '
            f'target="_blank" rel="noopener noreferrer">{match.group(1)}</a>'
        )
        return f"\x00{len(links) - 1}\x00"

    text = re.sub(r"\[([^\]]+)\]\(([^)\s]+)\)", _stash_link, text)

    # Bold (**text** or __text__)
    text = re.sub(r"\*\*(.+?)\*\*", r"<strong>\1</strong>", text)
    text = re.sub(r"(?<![\w/])__(.+?)__(?![\w/])", r"<strong>\1</strong>", text)

    # Italic (*text* or _text_)
    text = re.sub(r"(?<![\w*])\*([^*\n]+)\*(?![\w*])", r"<em>\1</em>", text)
    text = re.sub(r"(?<![\w/])_([^_\n]+)_(?![\w/])", r"<em>\1</em>", text)

    # Unordered lists (- item or * item), then ordered lists (1. item)
    text = _render_lists(text, r"^[-*]\s+", "ul", "list-disc list-inside my-2 space-y-1")
    text = _render_lists(text, r"^\d+\.\s+", "ol", "list-decimal list-inside my-2 space-y-1")

    text = re.sub(r"\x00(\d+)\x00", lambda m: links[int(m.group(1))], text)

    # Line breaks (preserve newlines as <br>)
    text = text.replace("\n", "<br>")

    return text
