"""Package entry point for ``python -m gladia_batch``.

WHY: Users run the transcriber as ``python -m gladia_batch <directory>``.
Python's ``-m`` flag looks for ``__main__.py`` inside the package and
executes it.

HOW: Delegates to the CLI's main() function.
"""

from gladia_batch.cli import main

if __name__ == "__main__":
    main()
