"""
pwsurround package initialisation.

* ``pwsurround.__version__`` is resolved from the installed distribution
  metadata.
* :func:`pwsurround.config.load_settings` is re-exported at the top level::

      from pwsurround import load_settings
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__: str = version("pwsurround")
except PackageNotFoundError:
    # Source tree without an installed wheel.
    __version__ = "0.0.0"

from .config import load_settings  # noqa: E402 – late import after version lookup

__all__: list[str] = ["load_settings", "__version__"]
