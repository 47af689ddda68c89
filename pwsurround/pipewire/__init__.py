"""PipeWire configuration: rendering, well-known paths and atomic persistence."""

from .paths import default_target_path, dev_target_path, migrate_legacy
from .template import NODE_NAME_SUFFIX, extract_ir_path, load_template, render, render_default
from .writer import ConfigWriter

__all__ = [
    "NODE_NAME_SUFFIX",
    "ConfigWriter",
    "default_target_path",
    "dev_target_path",
    "extract_ir_path",
    "load_template",
    "migrate_legacy",
    "render",
    "render_default",
]
