"""Prompt Construction Package"""

from git_commit_helper.prompts.builder import (
    PromptBuilder,
    PromptConfig,
    LanguageMode,
    REVIEW_HEADING_EN,
    REVIEW_HEADING_ZH,
    build_review_prompt,
    build_translation_prompt,
    build_commit_translation_prompt,
)

__all__ = [
    "PromptBuilder",
    "PromptConfig",
    "LanguageMode",
    "REVIEW_HEADING_EN",
    "REVIEW_HEADING_ZH",
    "build_review_prompt",
    "build_translation_prompt",
    "build_commit_translation_prompt",
]
