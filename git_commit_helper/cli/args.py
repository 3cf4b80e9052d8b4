"""CLI Argument Parsing"""

import argparse
import argcomplete

from git_commit_helper import COMMIT_TYPE_NAMES, LANGUAGE_MODES, __version__

DEFAULT_TEST_TEXT = "这是一个测试消息。"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='git-commit-helper',
        description='AI-assisted commit messages, translation and code review for git',
        epilog='Example: git-commit-helper commit -t feat --issues 42'
    )

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--debug', action='store_true', help='Log requests and responses to stderr')

    sub = parser.add_subparsers(dest='command', metavar='COMMAND')

    sub.add_parser('config', help='Interactive setup wizard')
    sub.add_parser('show', help='Show the config file path and contents')

    install = sub.add_parser('install', help='Install the commit-msg hook into a repository')
    install.add_argument('-p', '--path', metavar='PATH', help='Repository path (default: current directory)')
    install.add_argument('-f', '--force', action='store_true', help='Replace an existing commit-msg hook')

    service = sub.add_parser('service', help='Manage AI services')
    service_sub = service.add_subparsers(dest='service_command', metavar='ACTION', required=True)
    service_sub.add_parser('add', help='Add an AI service')
    service_sub.add_parser('edit', help='Edit a configured AI service')
    service_sub.add_parser('remove', help='Remove an AI service')
    service_sub.add_parser('set-default', help='Choose the default AI service')

    sub.add_parser('list', help='List configured AI services')

    test = sub.add_parser('test', help='Translate a test text with a chosen service')
    test.add_argument('-t', '--text', default=DEFAULT_TEST_TEXT, help='Chinese text to translate')

    translate = sub.add_parser('translate', help='Translate Chinese text to English')
    source = translate.add_mutually_exclusive_group(required=True)
    source.add_argument('-f', '--file', metavar='FILE', help='File to translate')
    source.add_argument('-t', '--text', metavar='TEXT', help='Text to translate')

    commit = sub.add_parser('commit', aliases=['suggest'], help='Generate a commit message and commit')
    commit.add_argument('-t', '--type', type=str, choices=COMMIT_TYPE_NAMES, help='Force commit type')
    commit.add_argument('-m', '--message', metavar='TEXT', help='Describe the change: -m "fix login timeout"')
    commit.add_argument('-a', '--all', action='store_true', help='Stage modified tracked files first (git add -u)')
    commit.add_argument('--amend', action='store_true', help='Rewrite the message of the last commit')
    commit.add_argument('--no-review', action='store_true', help='Skip the AI code review')
    commit.add_argument('--issues', nargs='+', metavar='REF', help='Issue links or numbers to reference')
    commit.add_argument('--lang', choices=LANGUAGE_MODES, help='Message language (default: from config)')
    commit.add_argument('--log', action=argparse.BooleanOptionalAction, default=None,
                        help='Add a Log: line for the change log')
    commit.add_argument('--test-suggestions', action=argparse.BooleanOptionalAction, default=None,
                        help='Add an Influence: block with test suggestions')
    commit.add_argument('-y', '--yes', action='store_true', help='Commit without asking for confirmation')

    ai_review = sub.add_parser('ai-review', help='Turn the hook-time AI review on or off')
    toggle = ai_review.add_mutually_exclusive_group()
    toggle.add_argument('--enable', action='store_true', help='Enable AI review')
    toggle.add_argument('--disable', action='store_true', help='Disable AI review')
    toggle.add_argument('--status', action='store_true', help='Show whether AI review is enabled')

    review = sub.add_parser('review', help='Review staged changes or a GitHub / Gerrit change')
    review.add_argument('url', nargs='?', help='Pull request, commit or Gerrit change URL')

    hook = sub.add_parser('hook', help='commit-msg hook entry point')
    hook.add_argument('file', help='Commit message file passed by git')
    hook.add_argument('--no-review', action='store_true', help='Skip the AI code review')

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
    return args
