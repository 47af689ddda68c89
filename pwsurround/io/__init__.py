"""Public façade for the ``io`` sub-package.

Wrappers around external tools (``pw-cli``) and small helpers that read from
the filesystem.

Attributes:
    read_header: Read sample rate / channel count from an audio header.
    file_checksum: Content digest used to recognise staged IR copies.
    list_audio_devices: Parse ``pw-cli list-objects`` into property dicts.
    filter_audio_sinks: Keep real ``Audio/Sink`` nodes only.
"""

from .pwcli import filter_audio_sinks, list_audio_devices, parse_pwcli_output
from .wavinfo import HeaderInfo, file_checksum, read_header

__all__ = [
    "HeaderInfo",
    "read_header",
    "file_checksum",
    "list_audio_devices",
    "parse_pwcli_output",
    "filter_audio_sinks",
]
