"""Commit message model and post-processing of AI responses."""

import re
import textwrap
from dataclasses import dataclass, field

from git_commit_helper import COMMIT_TYPE_NAMES
from git_commit_helper.output import display_width

MAX_LINE_LENGTH = 72

TYPES_PATTERN = '|'.join(COMMIT_TYPE_NAMES)

# "Key: value" trailer, e.g. "Change-Id: I1234", "Fixes: #12", "Log: ..."
MARK_RE = re.compile(r'^[A-Za-z][A-Za-z0-9-]*:\s*\S.*$')
TITLE_TYPE_RE = re.compile(r'^(?P<type>[A-Za-z]+)(?P<scope>\([^)]*\))?(?P<bang>!)?\s*[:：]\s*(?P<subject>.*)$')
SCISSORS_RE = re.compile(r'^# -+ >8 -+$')
JUNK_RE = re.compile(r'^(diff --git |@@\s|[+-]{3}\s[ab]/|index [0-9a-f]|```)')
FENCE_RE = re.compile(r'^\s*```[\w-]*\s*$')
LIST_ITEM_RE = re.compile(r'^(\s*)([-*•]|\d+[.)])\s+')
CJK_RE = re.compile(r'[ᄀ-ᅟ⺀-꓏가-힣豈-﫿︰-﹏＀-｠￠-￦]')

AUTO_GENERATED_PREFIXES = ("Merge", "Cherry-pick", "Revert")
CHANGE_ID_KEY = "Change-Id"


@dataclass
class CommitMessage:
    """A commit message split into title, body and trailer marks."""
    title: str
    body: str | None = None
    marks: list[str] = field(default_factory=list)

    @classmethod
    def parse(cls, content: str) -> 'CommitMessage':
        lines = []
        for line in content.splitlines():
            if SCISSORS_RE.match(line):
                break
            if line.startswith('#'):
                continue
            lines.append(line.rstrip())

        while lines and not lines[0].strip():
            lines.pop(0)
        if not lines:
            return cls(title="")

        title = lines[0].strip()
        rest = lines[1:]
        _strip_blank_edges(rest)

        marks = []
        last_blank = max((i for i, line in enumerate(rest) if not line.strip()), default=-1)
        trailer = rest[last_blank + 1:]
        if trailer and all(_is_mark(line) for line in trailer):
            marks = [line.strip() for line in trailer]
            rest = rest[:last_blank + 1]
            _strip_blank_edges(rest)

        body = '\n'.join(rest) if rest else None
        return cls(title=title, body=body, marks=marks)

    def format(self) -> str:
        parts = [self.title]
        if self.body:
            parts.extend(["", self.body])
        if self.marks:
            parts.append("")
            parts.extend(self.marks)
        return '\n'.join(parts)

    def get_mark(self, key: str) -> str | None:
        prefix = f"{key.lower()}:"
        for mark in self.marks:
            if mark.lower().startswith(prefix):
                return mark.split(':', 1)[1].strip()
        return None

    def add_mark(self, key: str, value: str) -> None:
        mark = f"{key}: {value}"
        if mark not in self.marks:
            self.marks.append(mark)

    @property
    def change_id(self) -> str | None:
        return self.get_mark(CHANGE_ID_KEY)

    def set_change_id(self, change_id: str) -> None:
        """Gerrit expects Change-Id as the very last trailer."""
        prefix = f"{CHANGE_ID_KEY.lower()}:"
        self.marks = [m for m in self.marks if not m.lower().startswith(prefix)]
        self.marks.append(f"{CHANGE_ID_KEY}: {change_id}")


def _is_mark(line: str) -> bool:
    """A "Key: value" trailer line; "feat: ..." style titles do not count."""
    line = line.strip()
    if not MARK_RE.match(line):
        return False
    return line.split(':', 1)[0] not in COMMIT_TYPE_NAMES


def _strip_blank_edges(lines: list[str]) -> None:
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()


def contains_chinese(text: str) -> bool:
    return any('一' <= c <= '鿿' for c in text)


def is_auto_generated(title: str) -> bool:
    return title.startswith(AUTO_GENERATED_PREFIXES)


def clean_ai_response(text: str) -> str:
    """Strip markup and chatter around the commit message an AI returned."""
    text = text.strip()
    if text.startswith("[NO_TRANSLATE]"):
        text = text[len("[NO_TRANSLATE]"):]

    lines = text.strip().split('\n')
    # Whole answer wrapped in a fence: ```plaintext ... ```
    if lines and FENCE_RE.match(lines[0]):
        lines = lines[1:]
        for i, line in enumerate(lines):
            if FENCE_RE.match(line):
                lines = lines[:i]
                break
    while lines and lines[0].strip() in ('', 'plaintext', 'text'):
        lines.pop(0)

    start_idx = 0
    for i, line in enumerate(lines):
        if re.match(rf'^[`\s]*({TYPES_PATTERN})[\(!:：]', line):
            start_idx = i
            break

    end_idx = len(lines)
    for i in range(start_idx + 1, len(lines)):
        if JUNK_RE.match(lines[i]):
            end_idx = i
            break

    lines = lines[start_idx:end_idx]
    if lines:
        lines[0] = lines[0].strip('`').strip()
    return '\n'.join(lines).strip()


def ensure_commit_type(message: str, commit_types: list[str]) -> str:
    """Force the title's conventional type to one of commit_types.

    A known but different type is replaced (scope kept); a title without a
    known type gets commit_types[0] prepended.
    """
    if not commit_types:
        return message
    first_line, sep, rest = message.partition('\n')
    wanted = commit_types[0]

    match = TITLE_TYPE_RE.match(first_line.strip())
    if match and match.group('type').lower() in commit_types:
        return message
    if match and match.group('type').lower() in COMMIT_TYPE_NAMES:
        scope = match.group('scope') or ''
        bang = match.group('bang') or ''
        first_line = f"{wanted}{scope}{bang}: {match.group('subject').strip()}"
    else:
        first_line = f"{wanted}: {first_line.strip()}"
    return first_line + sep + rest


def _hanging_indent(line: str) -> str:
    match = LIST_ITEM_RE.match(line)
    if match:
        return ' ' * len(match.group(0))
    return re.match(r'^\s*', line).group(0)


def _wrap_cjk_line(line: str, width: int) -> list[str]:
    """Greedy wrap by display width; CJK chars may break anywhere, words may not."""
    indent = _hanging_indent(line)
    cjk = CJK_RE.pattern
    tokens = re.findall(rf'{cjk}|\s+|(?:(?!{cjk})\S)+', line)
    result = []
    current, current_width = "", 0
    for token in tokens:
        token_width = display_width(token)
        if current_width + token_width > width and current.strip():
            result.append(current.rstrip())
            current, current_width = indent, len(indent)
            if token.isspace():
                continue
        current += token
        current_width += token_width
    if current.strip():
        result.append(current.rstrip())
    return result


def wrap_line(line: str, width: int = MAX_LINE_LENGTH) -> list[str]:
    if not line.strip() or display_width(line) <= width:
        return [line]
    if CJK_RE.search(line):
        return _wrap_cjk_line(line, width)
    return textwrap.wrap(
        line,
        width=width,
        subsequent_indent=_hanging_indent(line),
        break_long_words=False,
        break_on_hyphens=False,
    ) or [line]


def wrap_text(text: str, width: int = MAX_LINE_LENGTH) -> str:
    """Wrap every line of text to width, keeping blank lines."""
    wrapped = []
    for line in text.split('\n'):
        wrapped.extend(wrap_line(line, width))
    return '\n'.join(wrapped)


def format_commit_message(raw: str, commit_type: str | None = None,
                          issues: list[tuple[str, str]] | None = None,
                          change_id: str | None = None,
                          width: int = MAX_LINE_LENGTH) -> str:
    """Turn an AI answer into the final commit message text."""
    cleaned = clean_ai_response(raw)
    if commit_type:
        cleaned = ensure_commit_type(cleaned, [commit_type])

    message = CommitMessage.parse(cleaned)
    if message.body:
        message.body = wrap_text(message.body, width)
    for key, value in issues or []:
        message.add_mark(key, value)

    change_id = change_id or message.change_id
    if change_id:
        message.set_change_id(change_id)
    return message.format()
