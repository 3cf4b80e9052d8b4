"""Prompt Builder - Construct AI prompts for commit messages, reviews and translation."""

from dataclasses import dataclass

from git_commit_helper import COMMIT_TYPES, LANGUAGE_MODES
from git_commit_helper.commit.message import wrap_text
from git_commit_helper.git import ProcessedDiff

LanguageMode = str  # one of LANGUAGE_MODES

REVIEW_HEADING_ZH = "代码审查报告："
REVIEW_HEADING_EN = "Code Review Report:"

# Format templates per language mode; every template shows FORMAT only
_EN_TEMPLATE = """\
type(scope): [English title, imperative mood]

- [English bullet: what changed and why]
- [English bullet: another detail if needed]"""

_ZH_TEMPLATE = """\
type(scope): [中文标题]

- [中文要点：改了什么，为什么]
- [中文要点：其他必要细节]"""

FORMAT_TEMPLATES: dict[str, str] = {
    "en": _EN_TEMPLATE,
    "zh": _ZH_TEMPLATE,
    "bilingual": f"{_EN_TEMPLATE}\n\n{_ZH_TEMPLATE}",
}

_INFLUENCE_TEMPLATE = """\
Influence:
1. [what to test or verify]
2. [another affected area]"""

_LOG_TEMPLATE = "Log: [one line for the change log, in user-facing terms]"


@dataclass
class PromptConfig:
    """Options that shape the commit message prompt."""
    language: LanguageMode = "bilingual"
    commit_type: str | None = None
    description: str | None = None
    log_field: bool = False
    test_suggestions: bool = False
    max_title_length: int = 50

    def __post_init__(self):
        if self.language not in LANGUAGE_MODES:
            raise ValueError(f"Unknown language mode: {self.language}")


class PromptBuilder:
    """Builds (system prompt, user content) pairs for the AI services."""

    def build_commit_prompt(self, diff: ProcessedDiff,
                            config: PromptConfig | None = None) -> tuple[str, str]:
        config = config or PromptConfig()
        sections = [
            self._build_role_section(config),
            self._build_format_section(config),
            self._build_type_section(config),
            self._build_extras_section(config),
            self._build_rules_section(config),
        ]
        system = "\n\n".join(filter(None, sections))
        user = "\n\n".join(filter(None, [
            self._build_description_section(config),
            self._build_diff_section(diff),
        ]))
        return system, user

    def _build_role_section(self, config: PromptConfig) -> str:
        return f"""You are an expert at writing git commit messages. Summarize the staged changes below into one commit message.

- The first line is the title: "type(scope): subject", at most {config.max_title_length} characters
- The scope is ONE word naming the module or component, never a file path
- The body is a short bullet list explaining what changed and why
- Describe only what the diff shows; do not invent changes"""

    def _build_format_section(self, config: PromptConfig) -> str:
        if config.language == "bilingual":
            layout = ("Write the English title and body first, then a blank line, "
                      "then the same title and body in Chinese. Use the same type and scope in both titles.")
        elif config.language == "zh":
            layout = "Write the title subject and the body in Chinese. Keep the type and scope in English."
        else:
            layout = "Write the title and the body in English."

        return f"""<format>
{layout}
CRITICAL: This shows FORMAT only. Never use words from it. Analyze the ACTUAL diff.

{FORMAT_TEMPLATES[config.language]}
</format>"""

    def _build_type_section(self, config: PromptConfig) -> str:
        if config.commit_type:
            return f"IMPORTANT: Use type '{config.commit_type}' for this commit."
        types_list = "\n".join(f"  - {t}: {desc}" for t, desc in COMMIT_TYPES.items())
        return f"Choose the most appropriate type:\n{types_list}"

    def _build_extras_section(self, config: PromptConfig) -> str:
        parts = []
        if config.test_suggestions:
            parts.append("After the body, add a blank line and an Influence block with numbered "
                         "suggestions of what a tester should verify:\n\n" + _INFLUENCE_TEMPLATE)
        if config.log_field:
            parts.append("End the message with a blank line and a single Log line:\n\n" + _LOG_TEMPLATE)
        return "\n\n".join(parts)

    def _build_rules_section(self, config: PromptConfig) -> str:
        return """<instructions>
Rules:
- Output ONLY the commit message, starting directly with the type(scope): line
- Plain text only: no markdown, no code fences, no bold
- No preamble like "Here's a commit message:" and no closing remarks
- Keep every body line under 72 characters
</instructions>"""

    def _build_description_section(self, config: PromptConfig) -> str:
        if not config.description:
            return ""
        return f"""<description>
The developer described this change as:
"{config.description}"

Make this the focus of the title, verified against the diff.
</description>"""

    def _build_diff_section(self, diff: ProcessedDiff) -> str:
        parts = ["<changes>", f"FILES CHANGED: {diff.total_files}"]
        if diff.filtered_files:
            parts.append(f"Generated files left out: {', '.join(diff.filtered_files)}")
        parts.extend(["", diff.text])
        if diff.truncated:
            parts.append("\n[Note: Diff was truncated due to size. Describe the overall scope.]")
        parts.append("</changes>")
        return "\n".join(parts)


def build_review_prompt(language: LanguageMode = "bilingual") -> str:
    """System prompt for reviewing a diff; the report is Chinese unless language is en."""
    if language == "en":
        return f"""You are a professional code reviewer. Review the following code changes and report in English. Focus on:

1. Code quality:
   - Is the code clear and easy to follow
   - Are variables and functions named well
   - Is the structure reasonable

2. Potential issues:
   - Possible bugs
   - Edge cases
   - Error handling
   - Resource usage and release

3. Best practices:
   - Coding conventions
   - Design patterns
   - Reuse
   - Modularity and decoupling

4. Performance:
   - Algorithm efficiency
   - Resource efficiency
   - Possible bottlenecks

5. Security:
   - Input validation
   - Data safety
   - Permission checks

Start with "{REVIEW_HEADING_EN}" and describe the problems found and the suggested improvements concisely. If the code follows best practices, say so."""

    return f"""您是一位专业的代码审查者，请对以下代码变更进行审查并给出中文评价。请着重关注：

1. 代码质量：
   - 代码是否清晰易懂
   - 变量和函数命名是否恰当
   - 代码结构是否合理

2. 潜在问题：
   - 可能的bug
   - 边界条件处理
   - 异常情况的处理
   - 资源使用和释放

3. 最佳实践：
   - 是否符合编程规范
   - 是否遵循设计模式
   - 代码重用性
   - 模块化和解耦

4. 性能考虑：
   - 算法效率
   - 资源使用效率
   - 可能的性能瓶颈

5. 安全性：
   - 输入验证
   - 数据安全
   - 权限检查

请以"{REVIEW_HEADING_ZH}"开头，使用简洁的语言描述发现的问题和改进建议。如果代码符合最佳实践，也请给出正面的评价。"""


def build_translation_prompt(text: str) -> str:
    """System prompt asking for an English translation of Chinese text."""
    return f"""You are a professional translator. Please translate the following Chinese text to English.
Important rules:
1. Keep all English content, numbers, and English punctuation unchanged
2. Do not translate any content inside English double quotes
3. Preserve the case of all English words
4. Only return the English translation, DO NOT include the original Chinese text
5. Keep simple and concise, no need to rewrite or expand the content

Example response format:
feat: add support for external plugins

1. Implement plugin loading mechanism
2. Add plugin configuration interface
3. Setup plugin discovery path: "/插件"

Text to translate:
{wrap_text(text)}"""


COMMIT_TRANSLATION_SYSTEM = "你是一个代码提交信息翻译助手。"


def build_commit_translation_prompt(text: str) -> tuple[str, str]:
    """(system, user) pair translating an English commit message into Chinese."""
    return COMMIT_TRANSLATION_SYSTEM, f"请将以下提交信息翻译成中文：\n\n{text}"
