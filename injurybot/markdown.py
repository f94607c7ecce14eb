"""
Minimal Markdown to HTML conversion for chat bubbles.

Only the subset the model tends to produce is handled: bold, italic, numbered
and bulleted lists, and line breaks. Input is trusted and never escaped.
"""
import re

# Stray NULs are masked too, so every NUL left in the text opens a placeholder.
MASK_RE = re.compile(r"<[^>]+>|\x00")
PLACEHOLDER_RE = re.compile(r"\x00(\d+)\x00")
BLOCK_TAG_RE = re.compile(r"<(?:p|ul|ol|li|div|h[1-6]|blockquote|pre|table)\b", re.IGNORECASE)

INLINE_RULES = (
    (re.compile(r"\*\*(.*?)\*\*"), r"<strong>\1</strong>"),
    (re.compile(r"__(.*?)__"), r"<strong>\1</strong>"),
    (re.compile(r"\*(.*?)\*"), r"<em>\1</em>"),
    (re.compile(r"_(.*?)_"), r"<em>\1</em>"),
)

NUMBERED_ITEM_RE = re.compile(r"^\d+\.[ \t]+(.*?)$", re.MULTILINE)
BULLET_ITEM_RE = re.compile(r"^[-*•][ \t]+(.*?)$", re.MULTILINE)
LIST_RUN_RE = re.compile(r"(?:<li>.*?</li>\n?)+")


def _render_inline(text: str) -> str:
    # Existing tags are swapped out so emphasis never reaches into attributes
    # such as target="_blank".
    tags = []

    def stash(match):
        tags.append(match.group(0))
        return f"\x00{len(tags) - 1}\x00"

    masked = MASK_RE.sub(stash, text)
    for pattern, replacement in INLINE_RULES:
        masked = pattern.sub(replacement, masked)
    return PLACEHOLDER_RE.sub(lambda m: tags[int(m.group(1))], masked)


def _wrap_list(match) -> str:
    block = match.group(0)
    trailing = "\n" if block.endswith("\n") else ""
    items = block.rstrip("\n").replace("</li>\n", "</li>")
    return f"<ul>{items}</ul>{trailing}"


def render(markdown: str) -> str:
    """Convert a model response to HTML. Numbered lists also become <ul>."""
    if not markdown:
        return ""
    html = _render_inline(markdown)

    html = NUMBERED_ITEM_RE.sub(r"<li>\1</li>", html)
    html = BULLET_ITEM_RE.sub(r"<li>\1</li>", html)
    html = LIST_RUN_RE.sub(_wrap_list, html)

    html = re.sub(r"\n{3,}", "</p><p>", html)
    html = html.replace("\n\n", "<br><br>")
    html = html.replace("\n", "<br>")

    if not BLOCK_TAG_RE.match(html):
        html = f"<p>{html}</p>"
    return html
