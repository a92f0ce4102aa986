"""Executable entrypoint for `python -m cpas`.

Delegates directly to :func:`cpas.cli.main`.
"""

from cpas.cli import main

if __name__ == "__main__":
    main()
