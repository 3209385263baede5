import sys

from worktree_manager.cli.main import main

sys.exit(main())
