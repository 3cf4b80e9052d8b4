"""CLI Utility Functions"""

import os
import shlex
import subprocess
import sys
import tempfile

from git_commit_helper.output import bold, colorize_commit_type, dim, print_box
from git_commit_helper.git import ProcessedDiff


def edit_message(message: str) -> str | None:
    """Open message in user's editor. Returns edited text or None on failure."""
    editor = os.environ.get('VISUAL') or os.environ.get('EDITOR')
    if not editor:
        editor = 'notepad' if sys.platform == 'win32' else 'vi'

    tmp = tempfile.NamedTemporaryFile(mode='w', suffix='.gitcommit', delete=False, encoding='utf-8')
    try:
        tmp.write(message)
        tmp.close()
        subprocess.run([*shlex.split(editor), tmp.name], check=True)
        with open(tmp.name, 'r', encoding='utf-8') as f:
            edited = '\n'.join(line for line in f.read().splitlines() if not line.startswith('#')).strip()
        return edited if edited else None
    except (subprocess.CalledProcessError, OSError):
        return None
    finally:
        try:
            os.unlink(tmp.name)
        except OSError as e:
            print(f"Warning: Could not delete temp file {tmp.name}: {e}", file=sys.stderr)


def display_message(message: str) -> None:
    """Show the commit message in a box with the type prefix colored."""
    print()
    print_box(message)
    first = colorize_commit_type(message.split('\n', 1)[0])
    print(dim("  title: ") + first)


def display_file_list(processed: ProcessedDiff, max_shown: int = 10) -> None:
    """Show which files go into the prompt, collapsing long lists."""
    if not processed.files and not processed.filtered_files:
        return
    print(bold("Changes:"))
    shown = processed.files[:max_shown]
    for path in shown:
        print(dim(f"  {path}"))
    remaining = len(processed.files) - len(shown)
    if remaining > 0:
        print(dim(f"  ... and {remaining} more files"))
    if processed.filtered_files:
        print(dim(f"  {len(processed.filtered_files)} generated files left out"))
    if processed.omitted_files:
        print(dim(f"  {len(processed.omitted_files)} files omitted, diff too large"))
