"""Module entrypoint for ``python -m mdexplorer``."""

from .cli import main


if __name__ == "__main__":
    main()
