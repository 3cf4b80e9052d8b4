import sys

from git_commit_helper.cli.main import main

sys.exit(main())
