"""
Settings package façade.

* :func:`load_settings` – locate, read and validate the settings YAML.
* :func:`save_settings` – persist settings atomically.
* :class:`Settings` – Pydantic model of the validated settings.
"""

from .loader import load_settings, save_settings, settings_path  # noqa: F401
from .schema import Settings  # noqa: F401

__all__: list[str] = ["load_settings", "save_settings", "settings_path", "Settings"]
