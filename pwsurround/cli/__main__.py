"""Module wrapper so running ``python -m pwsurround.cli`` matches the console script."""

from pwsurround.cli import main


if __name__ == "__main__":  # pragma: no cover
    main()
