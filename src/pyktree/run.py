"""Direct entry point for the pyktree command.

Imports and executes the main function from __main__.py, so the
console script does not go through runpy.
"""

import sys


def main() -> int:
    """Entry point for pyktree command.

    Returns:
        Exit code
    """
    from pyktree.__main__ import main as _main
    return _main()


if __name__ == "__main__":
    sys.exit(main())
