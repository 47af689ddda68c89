"""
Module entry-point that makes the package runnable with

    python -m pwsurround

The behaviour is identical to the *pwsurround-cli* console script.
"""

from pwsurround.cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
