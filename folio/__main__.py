"""Entry point for the Folio CLI.

Running ``python -m folio`` dispatches to the click group in the cli module.
"""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
