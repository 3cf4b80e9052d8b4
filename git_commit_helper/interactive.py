"""Interactive terminal prompts: yes/no, numbered menus and free text."""

from git_commit_helper.output import dim, info


def confirm(prompt: str, default: bool = True, on_eof: bool | None = None) -> bool:
    """Ask a yes/no question.

    EOF on stdin (no terminal) answers on_eof, or the default when on_eof is
    None. Ctrl-C is not caught.
    """
    hint = "[Y/n]" if default else "[y/N]"
    while True:
        try:
            answer = input(f"{prompt} {dim(hint)} ").strip().lower()
        except EOFError:
            print()
            return default if on_eof is None else on_eof
        if not answer:
            return default
        if answer in ('y', 'yes'):
            return True
        if answer in ('n', 'no'):
            return False
        print("Please answer y or n")


def select(prompt: str, options: list[str], default: int = 0) -> int | None:
    """Show a numbered menu and return the chosen index, or None on quit."""
    if not options:
        return None

    print()
    for i, option in enumerate(options, 1):
        print(f"  {info(f'{i})')} {option}")
    print()

    while True:
        try:
            choice = input(f"{prompt} [1-{len(options)}, Enter={default + 1}, q=quit]: ").strip().lower()
        except (KeyboardInterrupt, EOFError):
            print()
            return None
        if choice == 'q':
            return None
        if choice == '':
            return default
        if choice.isdigit() and 1 <= int(choice) <= len(options):
            return int(choice) - 1
        print(f"Enter 1-{len(options)} or q")


def ask(prompt: str, default: str = "", allow_empty: bool = True) -> str:
    """Read a line of text, returning default when the user just presses Enter."""
    suffix = f" {dim(f'[{default}]')}" if default else ""
    while True:
        try:
            value = input(f"{prompt}{suffix}: ").strip()
        except EOFError:
            print()
            return default
        if value:
            return value
        if default or allow_empty:
            return default
        print("A value is required")
