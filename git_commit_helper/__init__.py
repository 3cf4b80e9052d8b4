"""
Git Commit Helper

AI-assisted commit messages, bilingual translation and code review for git.
"""

__version__ = "0.9.0"

# Conventional commit types accepted in generated titles
COMMIT_TYPES = {
    'feat': 'A new feature or capability',
    'fix': 'A bug fix',
    'docs': 'Documentation only changes',
    'style': 'Formatting, whitespace, no code change',
    'refactor': 'Code restructuring without behavior change',
    'test': 'Adding or updating tests',
    'chore': 'Maintenance tasks, dependencies, tooling',
    'perf': 'Performance improvement',
    'ci': 'CI/CD configuration changes',
    'build': 'Build system or external dependency changes',
}

COMMIT_TYPE_NAMES = list(COMMIT_TYPES.keys())

# Language of generated messages and review reports
LANGUAGE_MODES = ("bilingual", "en", "zh")

# Environment switches honored by the commit-msg hook
SKIP_REVIEW_ENV = "GIT_COMMIT_HELPER_SKIP_REVIEW"
NO_TRANSLATE_ENV = "GIT_COMMIT_HELPER_NO_TRANSLATE"
