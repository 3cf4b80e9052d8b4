"""Issue references given on the command line, turned into trailer marks."""

import re

GITHUB_ISSUE_RE = re.compile(
    r'^https?://github\.com/(?P<owner>[\w.-]+)/(?P<repo>[\w.-]+)/(?:issues|pull)/(?P<number>\d+)/?(?:[?#].*)?$'
)
PMS_RE = re.compile(r'^https?://pms\.[^/]+/.*?(?P<kind>bug|task|story)-view-(?P<number>\d+)\.html')
NUMBER_RE = re.compile(r'^#?(?P<number>\d+)$')


def parse_issue_reference(ref: str, current_repo: str | None = None) -> tuple[str, str]:
    """Map one reference to a (mark key, mark value) pair.

    >>> parse_issue_reference("https://github.com/octo/app/issues/7", "octo/app")
    ('Fixes', '#7')
    """
    ref = ref.strip()

    match = GITHUB_ISSUE_RE.match(ref)
    if match:
        repo = f"{match.group('owner')}/{match.group('repo')}"
        if current_repo and repo.lower() == current_repo.lower():
            return "Fixes", f"#{match.group('number')}"
        return "Fixes", f"{repo}#{match.group('number')}"

    match = NUMBER_RE.match(ref)
    if match:
        return "Fixes", f"#{match.group('number')}"

    match = PMS_RE.match(ref)
    if match:
        return "PMS", f"{match.group('kind').upper()}-{match.group('number')}"

    return "Issue", ref


def issue_marks(refs: list[str], current_repo: str | None = None) -> list[tuple[str, str]]:
    """Group references by mark key, keeping first-seen order.

    ["#1", "#2", pms-bug-3] -> [("Fixes", "#1 #2"), ("PMS", "BUG-3")]
    """
    grouped: dict[str, list[str]] = {}
    for ref in refs:
        for part in re.split(r'[\s,]+', ref):
            if not part:
                continue
            key, value = parse_issue_reference(part, current_repo)
            values = grouped.setdefault(key, [])
            if value not in values:
                values.append(value)
    return [(key, ' '.join(values)) for key, values in grouped.items()]
