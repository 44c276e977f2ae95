"""Audio Format — tests for header sniffing, duration estimates and analysis.

Tests cover:
    - each supported container is recognised from magic bytes
    - unknown and truncated headers return None
    - WAV duration read from byte rate and data chunk size
    - compressed formats estimated at the assumed bitrate
    - analyze_audio flags tiny, oversized and unrecognised files
"""

import struct

from recital.core.audio_format import (
    ASSUMED_BITRATE_BPS,
    MIN_AUDIO_BYTES,
    analyze_audio,
    estimate_duration,
    sniff_audio_format,
)
from recital.core.domain_types import AudioFormat


def make_wav(seconds: float, byte_rate: int = 16_000) -> bytes:
    data_size = int(seconds * byte_rate)
    fmt = struct.pack(
        "<4sIHHIIHH", b"fmt ", 16, 1, 1, 8_000, byte_rate, 2, 16,
    )
    body = fmt + b"data" + struct.pack("<I", data_size) + b"\x00" * data_size
    return b"RIFF" + struct.pack("<I", 4 + len(body)) + b"WAVE" + body


def test_sniff_wav():
    assert sniff_audio_format(make_wav(0.1)[:12]) is AudioFormat.WAV


def test_sniff_mp3_frame_sync_and_id3():
    assert sniff_audio_format(b"\xff\xfb\x90\x00" + b"\x00" * 8) is AudioFormat.MP3
    assert sniff_audio_format(b"ID3\x04" + b"\x00" * 8) is AudioFormat.MP3


def test_sniff_mp4_ogg_webm():
    assert sniff_audio_format(b"\x00\x00\x00\x20ftypM4A ") is AudioFormat.MP4
    assert sniff_audio_format(b"OggS\x00\x02" + b"\x00" * 6) is AudioFormat.OGG
    assert sniff_audio_format(b"\x1a\x45\xdf\xa3" + b"\x00" * 8) is AudioFormat.WEBM


def test_sniff_unknown_and_short():
    assert sniff_audio_format(b"PK\x03\x04" + b"\x00" * 8) is None
    assert sniff_audio_format(b"RI") is None


def test_wav_duration_exact():
    assert estimate_duration(make_wav(2.5), AudioFormat.WAV) == 2.5


def test_wav_without_data_chunk():
    header = make_wav(0.0)[:36]
    assert estimate_duration(header, AudioFormat.WAV) is None


def test_compressed_duration_from_size():
    data = b"\x00" * (ASSUMED_BITRATE_BPS // 8) * 3
    assert estimate_duration(data, AudioFormat.OGG) == 3.0


def test_analyze_valid_wav():
    result = analyze_audio(make_wav(1.0), max_bytes=10_000_000)
    assert result["is_corrupted"] is False
    assert result["format"] is AudioFormat.WAV
    assert result["duration"] == 1.0
    assert len(result["sha256"]) == 64


def test_analyze_too_small():
    result = analyze_audio(b"OggS", max_bytes=10_000_000)
    assert result["is_corrupted"] is True
    assert "too small" in result["error"]


def test_analyze_too_large():
    result = analyze_audio(make_wav(1.0), max_bytes=MIN_AUDIO_BYTES)
    assert result["is_corrupted"] is True
    assert "maximum size" in result["error"]


def test_analyze_unknown_format():
    result = analyze_audio(b"\x00" * 2000, max_bytes=10_000_000)
    assert result["is_corrupted"] is True
    assert "Unrecognized" in result["error"]
