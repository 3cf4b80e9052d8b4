"""Terminal Output Formatting Package"""

import os
import re
import shutil
import sys
import textwrap
import unicodedata


class Colors:
    """ANSI escape codes for terminal colors."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'
    RED = '\033[91m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    BLUE = '\033[94m'
    MAGENTA = '\033[35m'
    CYAN = '\033[36m'
    GRAY = '\033[90m'


def _supports_color(stream=None) -> bool:
    stream = stream or sys.stdout
    if os.environ.get('NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR'):
        return True
    if not hasattr(stream, 'isatty') or not stream.isatty():
        return False
    if sys.platform == 'win32':
        try:
            import ctypes
            kernel32 = ctypes.windll.kernel32
            kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 7)
            return True
        except (AttributeError, OSError):
            return False
    return True


def _supports_unicode() -> bool:
    if sys.platform != 'win32':
        return True
    try:
        '✓'.encode(sys.stdout.encoding or 'utf-8')
        return True
    except (UnicodeEncodeError, LookupError):
        return False


COLORS_ENABLED = _supports_color()
UNICODE_ENABLED = _supports_unicode()

CHECK = '✓' if UNICODE_ENABLED else '[OK]'
CROSS = '✗' if UNICODE_ENABLED else '[X]'
ARROW = '→' if UNICODE_ENABLED else '->'
RULE = '─' if UNICODE_ENABLED else '-'


def _colorize(text: str, *codes: str) -> str:
    if not COLORS_ENABLED:
        return text
    return f"{''.join(codes)}{text}{Colors.RESET}"


def success(text: str) -> str:
    return _colorize(text, Colors.GREEN)


def error(text: str) -> str:
    return _colorize(text, Colors.RED)


def warning(text: str) -> str:
    return _colorize(text, Colors.YELLOW)


def info(text: str) -> str:
    return _colorize(text, Colors.CYAN)


def dim(text: str) -> str:
    return _colorize(text, Colors.DIM)


def bold(text: str) -> str:
    return _colorize(text, Colors.BOLD)


def title(text: str) -> str:
    return _colorize(text, Colors.BLUE, Colors.BOLD)


def print_success(message: str) -> None:
    print(f"{success(CHECK)} {message}")


def print_error(message: str) -> None:
    print(f"{error(CROSS)} {error(message)}", file=sys.stderr)


def print_warning(message: str) -> None:
    marker = '⚠' if UNICODE_ENABLED else '[!]'
    print(f"{warning(marker)} {warning(message)}", file=sys.stderr)


def print_progress(message: str, percent: int | None = None) -> None:
    """Show a one-line progress status on stderr.

    Called with no percent when a request starts and with 100 when it ends.
    """
    stream = sys.stderr
    interactive = hasattr(stream, 'isatty') and stream.isatty()
    if percent is None:
        line = f"{dim(ARROW)} {message}..."
        if interactive:
            print(f"\r\033[K{line}", end='', file=stream, flush=True)
        else:
            print(line, file=stream)
        return
    if percent >= 100:
        status = success('done')
    else:
        status = dim(f"{percent}%")
    if interactive:
        print(f"\r\033[K{dim(ARROW)} {message}... {status}", file=stream, flush=True)


def print_section(heading: str, text: str) -> None:
    """Print a titled block between horizontal rules, used for reports."""
    width = min(shutil.get_terminal_size((80, 24)).columns, 80)
    print(dim(RULE * width))
    print(title(heading))
    print(text.rstrip())
    print(dim(RULE * width))


def print_box(text: str) -> None:
    term_width = shutil.get_terminal_size((80, 24)).columns
    # Box chrome takes 4 chars: "│ " + " │"
    max_width = max(int(term_width * 0.8), 60) - 4

    wrapped_lines = []
    for line in text.split('\n'):
        if len(line) > max_width:
            indent = '  ' if line.startswith('- ') else ''
            wrapped_lines.extend(textwrap.wrap(line, width=max_width, subsequent_indent=indent))
        else:
            wrapped_lines.append(line)

    content_width = max((display_width(line) for line in wrapped_lines), default=0)

    if UNICODE_ENABLED:
        top, bottom, side = f'┌─{"─" * content_width}─┐', f'└─{"─" * content_width}─┘', '│'
    else:
        top = bottom = f'+-{"-" * content_width}-+'
        side = '|'

    print(dim(top))
    for line in wrapped_lines:
        padding = ' ' * (content_width - display_width(line))
        print(f"{dim(side)} {line}{padding} {dim(side)}")
    print(dim(bottom))


def display_width(text: str) -> int:
    """Terminal columns taken by text; wide (CJK) characters count as two."""
    return sum(2 if unicodedata.east_asian_width(c) in ("W", "F") else 1 for c in text)


COMMIT_TYPE_COLORS = {
    'feat': Colors.GREEN,
    'fix': Colors.RED,
    'refactor': Colors.YELLOW,
    'docs': Colors.CYAN,
    'test': Colors.MAGENTA,
    'perf': Colors.GREEN,
    'chore': Colors.DIM,
    'style': Colors.DIM,
    'ci': Colors.CYAN,
    'build': Colors.CYAN,
}


def colorize_commit_type(message: str) -> str:
    """Color the commit type prefix on the first line of a commit message."""
    if not COLORS_ENABLED or not message:
        return message
    first, _, rest = message.partition('\n')
    match = re.match(r'^(\w+)(\([^)]*\))?(!?:)', first)
    if match and match.group(1) in COMMIT_TYPE_COLORS:
        prefix = match.group(0)
        first = _colorize(prefix, Colors.BOLD, COMMIT_TYPE_COLORS[match.group(1)]) + first[len(prefix):]
    return f"{first}\n{rest}" if rest else first


__all__ = [
    "Colors", "COLORS_ENABLED", "UNICODE_ENABLED",
    "CHECK", "CROSS", "ARROW", "RULE",
    "success", "error", "warning", "info", "dim", "bold", "title",
    "print_success", "print_error", "print_warning", "print_progress",
    "print_section", "print_box", "display_width",
    "colorize_commit_type", "COMMIT_TYPE_COLORS",
]
