"""Package entry point for ``python -m timedtext_converter``.

Delegates to the CLI's main() function.
"""

from timedtext_converter.cli import main

if __name__ == "__main__":
    main()
