"""Convert raw transcription output into the canonical timestamped transcript.

Every converter returns a :class:`~shownotes.models.Transcript`; its
``render()`` output is what lands in ``{stem}.txt``. Timestamps are always
``MM:SS`` with zero-padded, unbounded minutes.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .models import Transcript, TranscriptSegment

logger = logging.getLogger(__name__)

NO_TRANSCRIPTION_TEXT = "No transcription available."

# Deepgram: a timestamp every this many words, and a forced line break after them
DEEPGRAM_WORDS_PER_BLOCK = 30
ASSEMBLY_MAX_LINE_CHARS = 80

_LRC_TOOL_TAG = "[by:"
_LRC_TIMESTAMP = re.compile(r"\[(\d{1,3}):(\d{2})(?:\.\d+)?\]")
_LRC_LEADING = re.compile(r"^\[(\d{1,3}):(\d{2})\]\s*(.*)$")
_SRT_BLOCK_SPLIT = re.compile(r"\n\s*\n")
_SRT_START = re.compile(r"^(\d{2}):(\d{2}):(\d{2}),(\d{3})")
_SENTENCE_START = re.compile(r"^[A-Z]")
_SENTENCE_END = re.compile(r"[.!?]$")


def lrc_to_transcript(text: str) -> Transcript:
    """Parse whisper.cpp ``.lrc`` output.

    The ``[by:...]`` tool line is dropped, fractional seconds are truncated and
    blank lines are skipped. Lines without a leading timestamp keep their text.
    """
    segments: List[TranscriptSegment] = []
    for raw_line in text.splitlines():
        if raw_line.startswith(_LRC_TOOL_TAG):
            continue
        line = _LRC_TIMESTAMP.sub(lambda m: f"[{m.group(1)}:{m.group(2)}]", raw_line).strip()
        if not line:
            continue
        match = _LRC_LEADING.match(line)
        if match:
            start = int(match.group(1)) * 60 + int(match.group(2))
            segments.append(TranscriptSegment(float(start), match.group(3).strip()))
        else:
            segments.append(TranscriptSegment(None, line))
    return Transcript(segments)


def srt_to_transcript(text: str) -> Transcript:
    """Parse ``.srt`` subtitles into one line per cue.

    A cue needs an index line and a ``HH:MM:SS,mmm --> ...`` line; malformed
    blocks are skipped. Hours fold into minutes and milliseconds are dropped.
    """
    segments: List[TranscriptSegment] = []
    normalized = text.replace("\r\n", "\n").strip()
    if not normalized:
        return Transcript(segments)
    for block in _SRT_BLOCK_SPLIT.split(normalized):
        lines = block.strip().split("\n")
        if len(lines) < 2:
            continue
        match = _SRT_START.match(lines[1].strip())
        if not match:
            logger.debug("Skipping SRT block without a timing line: %r", block[:40])
            continue
        hours, minutes, seconds = (int(match.group(i)) for i in (1, 2, 3))
        start = hours * 3600 + minutes * 60 + seconds
        cue_text = " ".join(line.strip() for line in lines[2:] if line.strip())
        segments.append(TranscriptSegment(float(start), cue_text))
    return Transcript(segments)


def deepgram_to_transcript(words: Iterable[Mapping[str, Any]]) -> Transcript:
    """Lay out a Deepgram word stream.

    A word gets a timestamp when its index is a multiple of 30 or it starts
    with an uppercase letter. A line ends after a word ending in ``.``, ``!``
    or ``?``, after every 30th word and after the last word.
    """
    word_list = list(words)
    segments: List[TranscriptSegment] = []
    last_index = len(word_list) - 1
    for i, entry in enumerate(word_list):
        word = str(entry.get("word", ""))
        stamp = i % DEEPGRAM_WORDS_PER_BLOCK == 0 or bool(_SENTENCE_START.match(word))
        ends_line = (
            bool(_SENTENCE_END.search(word))
            or i % DEEPGRAM_WORDS_PER_BLOCK == DEEPGRAM_WORDS_PER_BLOCK - 1
            or i == last_index
        )
        start: Optional[float] = float(entry.get("start", 0.0)) if stamp else None
        segments.append(TranscriptSegment(start, word, ends_line=ends_line))
    return Transcript(segments)


def _ms_to_seconds(value: Any) -> float:
    return float(int(value) // 1000)


def _speaker_label(utterance: Mapping[str, Any]) -> Optional[str]:
    speaker = utterance.get("speaker")
    return None if speaker is None or speaker == "" else str(speaker)


def assembly_to_transcript(payload: Mapping[str, Any], speaker_labels: bool) -> Transcript:
    """Lay out a completed AssemblyAI job (times in milliseconds).

    Utterances win over words; words win over the plain ``text`` field.
    """
    utterances: List[Dict[str, Any]] = list(payload.get("utterances") or [])
    if utterances:
        segments = [
            TranscriptSegment(
                _ms_to_seconds(utt.get("start", 0)),
                str(utt.get("text", "")),
                speaker=_speaker_label(utt) if speaker_labels else None,
            )
            for utt in utterances
        ]
        return Transcript(segments, style="utterance")

    words: List[Dict[str, Any]] = list(payload.get("words") or [])
    if words:
        segments = []
        current_line = ""
        current_start = _ms_to_seconds(words[0].get("start", 0))
        for word in words:
            word_text = str(word.get("text", ""))
            if len(current_line) + len(word_text) > ASSEMBLY_MAX_LINE_CHARS:
                segments.append(TranscriptSegment(current_start, current_line.strip()))
                current_line = ""
                current_start = _ms_to_seconds(word.get("start", 0))
            current_line += f"{word_text} "
        if current_line:
            segments.append(TranscriptSegment(current_start, current_line.strip()))
        return Transcript(segments)

    fallback = payload.get("text") or NO_TRANSCRIPTION_TEXT
    return Transcript([TranscriptSegment(None, str(fallback))])


__all__ = [
    "NO_TRANSCRIPTION_TEXT",
    "assembly_to_transcript",
    "deepgram_to_transcript",
    "lrc_to_transcript",
    "srt_to_transcript",
]
