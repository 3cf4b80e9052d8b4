"""CLI Main Entry Point"""

import argparse
import logging
import os
import sys

from git_commit_helper.ai import AIError, chat_with_fallback
from git_commit_helper.commit import CommitMessage, format_commit_message, issue_marks
from git_commit_helper.config import Config, ConfigError, ConfigManager
from git_commit_helper.git import DiffProcessor, GitError, GitRepo
from git_commit_helper.hook import HookError
from git_commit_helper.interactive import confirm
from git_commit_helper.output import bold, dim, info, print_error, print_section, print_success, print_warning
from git_commit_helper.prompts import PromptBuilder, PromptConfig
from git_commit_helper.remote import RemoteError
from git_commit_helper.review import review_changes

from git_commit_helper.cli.args import parse_args
from git_commit_helper.cli import commands
from git_commit_helper.cli.utils import display_file_list, display_message, edit_message

logger = logging.getLogger(__name__)

LOG_ENV = "GIT_COMMIT_HELPER_LOG"

# Commands that work without any AI service configured
NO_SERVICE_COMMANDS = {'config', 'hook'}


def _init_logging(debug: bool) -> None:
    """DEBUG to stderr with --debug or GIT_COMMIT_HELPER_LOG=debug, else warnings only."""
    level_name = 'DEBUG' if debug else os.environ.get(LOG_ENV, 'WARNING').upper()
    level = getattr(logging, level_name, logging.WARNING)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    # Keep SDK and transport chatter out unless explicitly asked for
    for noisy in ('anthropic', 'httpx', 'httpcore'):
        logging.getLogger(noisy).setLevel(max(level, logging.INFO))


def _apply_overrides(args: argparse.Namespace, config: Config) -> None:
    if args.lang:
        config.language = args.lang
    if args.log is not None:
        config.log_field = args.log
    if args.test_suggestions is not None:
        config.test_suggestions = args.test_suggestions


def _collect_diff(repo: GitRepo, amend: bool) -> str:
    staged = repo.staged_diff()
    if not amend:
        return staged
    # Amending describes the last commit plus whatever is staged on top
    return "\n".join(filter(None, [repo.last_commit_diff(), staged]))


def _ask_action() -> str:
    """Return one of 'accept', 'edit', 'regenerate', 'quit'."""
    try:
        action = input(f"\n{dim('(e)dit, (r)egenerate, (q)uit, or Enter to commit: ')}").strip().lower()
    except (KeyboardInterrupt, EOFError):
        print()
        return 'quit'
    return {'': 'accept', 'y': 'accept', 'e': 'edit', 'r': 'regenerate', 'q': 'quit', 'n': 'quit'}.get(action, 'unknown')


def _ask_hint(current: str | None) -> str | None:
    try:
        hint = input(f"{dim('  Hint (Enter to keep): ')}").strip()
    except (KeyboardInterrupt, EOFError):
        return current
    return hint or current


def _generate_commit_flow(args: argparse.Namespace, config: Config) -> int:
    """Generate, review, confirm and commit.

    Returns:
        int: Exit code
    """
    _apply_overrides(args, config)
    repo = GitRepo()

    if args.all:
        repo.add_tracked()

    diff = _collect_diff(repo, args.amend)
    if not diff.strip():
        print_error("No staged changes. Run 'git add' first.")
        return 1

    report = review_changes(config, repo, no_review=args.no_review)
    if report:
        print_section("AI Code Review", report)
        if not args.yes and not confirm("Continue with the commit?", default=True):
            print(dim("Cancelled."))
            return 0

    processed = DiffProcessor(config.max_diff_chars).process(diff)
    display_file_list(processed)

    issues = issue_marks(args.issues, repo.current_github_repo()) if args.issues else None
    change_id = CommitMessage.parse(repo.last_commit_message()).change_id if args.amend else None
    if change_id:
        logger.debug("Keeping Change-Id %s", change_id)

    prompt_config = PromptConfig(
        language=config.language,
        commit_type=args.type,
        description=args.message,
        log_field=config.log_field,
        test_suggestions=config.test_suggestions,
    )
    builder = PromptBuilder()

    while True:
        system_prompt, user_content = builder.build_commit_prompt(processed, prompt_config)
        print(f"Generating commit message for {bold(str(processed.total_files))} files...")
        raw = chat_with_fallback(config, system_prompt, user_content)
        message = format_commit_message(raw, args.type, issues, change_id)
        if not message.strip():
            raise AIError("The AI service returned an empty commit message")

        display_message(message)
        if args.yes:
            break

        action = _ask_action()
        while action == 'unknown':
            print("Enter e, r, q or press Enter")
            action = _ask_action()
        if action == 'accept':
            break
        if action == 'quit':
            print(dim("Cancelled."))
            return 0
        if action == 'regenerate':
            prompt_config.description = _ask_hint(prompt_config.description)
            print(info("Regenerating..."))
            continue

        edited = edit_message(message)
        if edited is None:
            print_warning("Editor returned nothing, keeping the generated message")
        else:
            message = edited
            display_message(message)
        break

    repo.commit(message, amend=args.amend)
    print_success("Amended the last commit" if args.amend else "Committed")
    return 0


def _offer_setup(manager: ConfigManager) -> int:
    """Run the wizard when nothing is configured."""
    print_warning("No AI service is configured yet")
    if confirm("Run the setup wizard now?", default=True):
        return commands.run_setup(manager)
    print_error("Run 'git-commit-helper config' first")
    return 1


def _dispatch(args: argparse.Namespace, manager: ConfigManager) -> int:
    command = args.command

    if command == 'config':
        return commands.run_setup(manager)
    if command == 'hook':
        return commands.run_hook(args, manager)
    if command not in NO_SERVICE_COMMANDS and not manager.load().is_configured:
        return _offer_setup(manager)

    if command == 'install':
        return commands.run_install(args)
    if command == 'show':
        return commands.display_config(manager)
    if command == 'list':
        return commands.list_services(manager)
    if command == 'service':
        return commands.run_service(args, manager)
    if command == 'ai-review':
        return commands.run_ai_review(args, manager)
    if command == 'test':
        return commands.run_test(args.text, manager)
    if command == 'translate':
        return commands.run_translate(args, manager)
    if command == 'review':
        return commands.run_review(args, manager)
    if command in ('commit', 'suggest'):
        return _generate_commit_flow(args, manager.load())
    return 0


def main(argv: list[str] | None = None, manager: ConfigManager | None = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)
    _init_logging(args.debug or os.environ.get(LOG_ENV, '').lower() == 'debug')
    if args.command is None:
        return 0

    manager = manager or ConfigManager()
    logger.debug("Running %s with config %s", args.command, manager.path)
    try:
        return _dispatch(args, manager)
    except (AIError, ConfigError, GitError, RemoteError, HookError) as e:
        print_error(str(e))
        return 1
    except OSError as e:
        print_error(f"{e.strerror or e}: {e.filename}" if e.filename else str(e))
        return 1
    except KeyboardInterrupt:
        print()
        return 130
