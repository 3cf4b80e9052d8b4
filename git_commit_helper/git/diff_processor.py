"""Diff Processor - keep AI prompts within a size budget."""

import re
from dataclasses import dataclass, field

FILE_HEADER_RE = re.compile(r'^diff --git (?:a/)?(\S+) (?:b/)?(\S+)$', re.MULTILINE)


@dataclass
class ProcessedDiff:
    """Diff text ready to be placed in a prompt."""
    text: str
    files: list[str] = field(default_factory=list)
    filtered_files: list[str] = field(default_factory=list)
    omitted_files: list[str] = field(default_factory=list)
    truncated: bool = False

    @property
    def total_files(self) -> int:
        return len(self.files) + len(self.filtered_files) + len(self.omitted_files)

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()


class DiffProcessor:
    """Splits a unified diff by file, drops generated noise and enforces max_chars."""

    NOISE_PATTERNS: list[str] = [
        r'package-lock\.json$', r'yarn\.lock$', r'pnpm-lock\.yaml$',
        r'poetry\.lock$', r'Cargo\.lock$', r'Gemfile\.lock$', r'composer\.lock$',
        r'go\.sum$', r'\.min\.(js|css)$', r'\.map$', r'\.pyc$', r'__pycache__/',
        r'(^|/)dist/', r'(^|/)node_modules/', r'(^|/)vendor/', r'\.egg-info/',
    ]

    TRUNCATION_NOTE = "[... diff truncated, {count} more file(s) omitted: {names}]"

    def __init__(self, max_chars: int = 20000):
        self.max_chars = max_chars
        self._noise_re = [re.compile(p, re.IGNORECASE) for p in self.NOISE_PATTERNS]

    def is_noise(self, path: str) -> bool:
        return any(p.search(path) for p in self._noise_re)

    def split_by_file(self, diff: str) -> list[tuple[str, str]]:
        """Return (path, section) pairs in diff order.

        Text before the first 'diff --git' header (e.g. `git show` output)
        is kept as a pseudo-file with an empty path.
        """
        headers = list(FILE_HEADER_RE.finditer(diff))
        if not headers:
            return [("", diff)] if diff.strip() else []

        sections = []
        preamble = diff[:headers[0].start()]
        if preamble.strip():
            sections.append(("", preamble))
        for i, match in enumerate(headers):
            end = headers[i + 1].start() if i + 1 < len(headers) else len(diff)
            sections.append((match.group(2), diff[match.start():end]))
        return sections

    def process(self, diff: str) -> ProcessedDiff:
        kept, noise, omitted = [], [], []
        parts = []
        used = 0
        truncated = False

        for path, section in self.split_by_file(diff):
            if path and self.is_noise(path):
                noise.append(path)
                continue
            if truncated:
                omitted.append(path)
                continue

            room = self.max_chars - used
            if len(section) <= room:
                parts.append(section)
                used += len(section)
                if path:
                    kept.append(path)
                continue

            # First oversized section is cut at a line boundary, the rest omitted
            truncated = True
            cut = section[:room]
            cut = cut[:cut.rfind('\n') + 1] if '\n' in cut else ""
            if cut.strip():
                parts.append(cut)
                if path:
                    kept.append(path)
            elif path:
                omitted.append(path)

        text = ''.join(parts).rstrip('\n')
        if omitted:
            names = ', '.join(omitted[:10]) + (' ...' if len(omitted) > 10 else '')
            text += '\n' + self.TRUNCATION_NOTE.format(count=len(omitted), names=names)
        return ProcessedDiff(
            text=text,
            files=kept,
            filtered_files=noise,
            omitted_files=omitted,
            truncated=truncated,
        )
