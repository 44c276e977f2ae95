"""Audio Format Sniffing — container detection and duration estimates from raw bytes.

Invariants:
    - Pure functions over bytes: no filesystem access (shell reads the upload)
    - sniff_audio_format only trusts magic bytes, never file extensions or MIME
    - Estimates for compressed formats assume ASSUMED_BITRATE_BPS

Design Decisions:
    - Header parsing over ffprobe: no external binary in the deployment image
    - WAV duration read from the fmt byte rate and data chunk size, the only
      container where the header alone gives an exact answer
"""

import hashlib
import struct

from recital.core.domain_types import AudioFormat


MIN_AUDIO_BYTES: int = 1000
ASSUMED_BITRATE_BPS: int = 128_000
_HEADER_BYTES: int = 12
_EBML_MAGIC = b"\x1a\x45\xdf\xa3"


def sniff_audio_format(header: bytes) -> AudioFormat | None:
    """Identify the container from the first bytes of a file."""
    if len(header) < 4:
        return None
    if header[:4] == b"RIFF" and header[8:12] == b"WAVE":
        return AudioFormat.WAV
    if header[:3] == b"ID3":
        return AudioFormat.MP3
    if header[0] == 0xFF and (header[1] & 0xE0) == 0xE0:
        return AudioFormat.MP3
    if header[4:8] == b"ftyp":
        return AudioFormat.MP4
    if header[:4] == b"OggS":
        return AudioFormat.OGG
    if header[:4] == _EBML_MAGIC:
        return AudioFormat.WEBM
    return None


def _wav_duration(data: bytes) -> float | None:
    data_offset = data.find(b"data", _HEADER_BYTES)
    if data_offset == -1 or len(data) < max(32, data_offset + 8):
        return None
    (byte_rate,) = struct.unpack_from("<I", data, 28)
    (data_size,) = struct.unpack_from("<I", data, data_offset + 4)
    if byte_rate <= 0:
        return None
    return data_size / byte_rate


def estimate_duration(data: bytes, fmt: AudioFormat) -> float | None:
    """Best-effort duration in seconds."""
    if fmt is AudioFormat.WAV:
        return _wav_duration(data)
    return len(data) / (ASSUMED_BITRATE_BPS / 8)


def analyze_audio(data: bytes, max_bytes: int) -> dict:
    """Hash, sniff and size-check an uploaded file. Pure — caller supplies bytes."""
    digest = hashlib.sha256(data).hexdigest()
    if len(data) < MIN_AUDIO_BYTES:
        return _corrupted(digest, "File too small, likely corrupted")
    if len(data) > max_bytes:
        return _corrupted(digest, "File exceeds maximum size limit")
    fmt = sniff_audio_format(data[:_HEADER_BYTES])
    if fmt is None:
        return _corrupted(digest, "Unrecognized audio format or corrupted header")
    return {
        "format": fmt,
        "duration": estimate_duration(data, fmt),
        "sha256": digest,
        "is_corrupted": False,
        "error": None,
    }


def _corrupted(digest: str, error: str) -> dict:
    return {
        "format": None,
        "duration": None,
        "sha256": digest,
        "is_corrupted": True,
        "error": error,
    }
