#!/usr/bin/env python3
"""Tests for the transcript normalizer.

Every backend's raw output must end up in the same canonical form: one
``[MM:SS] text`` line per segment (or ``Speaker X (MM:SS): text`` for
AssemblyAI utterances), zero-padded minutes that never wrap at 60.
"""

import unittest

import pytest

from conftest import TEST_LRC, TEST_SRT
from shownotes import normalizer


@pytest.mark.unit
class TestLrcToTranscript(unittest.TestCase):
    """Test lrc_to_transcript (whisper.cpp output)."""

    def test_canonical_lines(self):
        """Tool line and blank lines are dropped, centiseconds truncated."""
        text = normalizer.lrc_to_transcript(TEST_LRC).render()
        self.assertEqual(
            text,
            "[00:00] Welcome to the show.\n"
            "[00:05] Today we talk about Python.\n"
            "[01:02] Thanks for listening.",
        )

    def test_three_digit_minutes(self):
        """Long recordings keep unbounded minutes."""
        text = normalizer.lrc_to_transcript("[123:45.67] Still going.").render()
        self.assertEqual(text, "[123:45] Still going.")

    def test_line_without_timestamp_kept(self):
        """Lines without a timestamp keep their text."""
        transcript = normalizer.lrc_to_transcript("[00:01.00] Hi\nno stamp here")
        self.assertEqual(transcript.render(), "[00:01] Hi\nno stamp here")

    def test_only_tool_line(self):
        """A file with only the tool line produces an empty transcript."""
        transcript = normalizer.lrc_to_transcript("[by:whisper.cpp]\n")
        self.assertEqual(len(transcript), 0)
        self.assertEqual(transcript.render(), "")

    def test_no_trailing_whitespace(self):
        """Rendered lines never end in whitespace."""
        text = normalizer.lrc_to_transcript("[00:02.00]   padded   \n").render()
        for line in text.splitlines():
            self.assertEqual(line, line.rstrip())


@pytest.mark.unit
class TestSrtToTranscript(unittest.TestCase):
    """Test srt_to_transcript (openai-whisper and whisper-diarization output)."""

    def test_blocks_become_lines(self):
        """Each cue becomes one line; multi-line cue text is joined by spaces."""
        lines = normalizer.srt_to_transcript(TEST_SRT).render().splitlines()
        self.assertEqual(
            lines,
            [
                "[00:00] Welcome to the show.",
                "[00:04] Today we talk about Python.",
                "[62:03] Thanks for listening.",
            ],
        )

    def test_hours_fold_into_minutes(self):
        """01:02:03 becomes 62 minutes and 3 seconds."""
        srt = "1\n01:02:03,999 --> 01:02:04,000\nLate line\n"
        self.assertEqual(normalizer.srt_to_transcript(srt).render(), "[62:03] Late line")

    def test_malformed_block_skipped(self):
        """Blocks without a timing line on line two are ignored."""
        srt = "garbage\n\n1\n00:00:01,000 --> 00:00:02,000\nKept\n"
        self.assertEqual(normalizer.srt_to_transcript(srt).render(), "[00:01] Kept")

    def test_windows_line_endings(self):
        """CRLF input parses like LF input."""
        srt = TEST_SRT.replace("\n", "\r\n")
        self.assertEqual(
            normalizer.srt_to_transcript(srt).render(),
            normalizer.srt_to_transcript(TEST_SRT).render(),
        )

    def test_empty_input(self):
        """Empty input yields an empty transcript."""
        self.assertEqual(normalizer.srt_to_transcript("  \n").render(), "")


def _words(*specs):
    return [{"word": word, "start": start} for word, start in specs]


@pytest.mark.unit
class TestDeepgramToTranscript(unittest.TestCase):
    """Test deepgram_to_transcript (word stream layout)."""

    def test_sentence_end_breaks_line(self):
        """A word ending in punctuation ends the line; the next line has no stamp if lowercase."""
        words = _words(("Hello", 0.0), ("world.", 0.5), ("again", 1.0))
        self.assertEqual(
            normalizer.deepgram_to_transcript(words).render(), "[00:00] Hello world.\nagain"
        )

    def test_capitalized_word_stamped_mid_line(self):
        """Capitalized words get their own timestamp inline."""
        words = _words(("we", 0.0), ("love", 1.0), ("Python.", 3.2))
        self.assertEqual(
            normalizer.deepgram_to_transcript(words).render(), "[00:00] we love [00:03] Python."
        )

    def test_thirty_word_blocks(self):
        """Every 30th word starts a new stamped line."""
        words = _words(*((f"w{i}", float(i)) for i in range(31)))
        lines = normalizer.deepgram_to_transcript(words).render().splitlines()
        self.assertEqual(len(lines), 2)
        self.assertTrue(lines[0].startswith("[00:00] w0 w1"))
        self.assertTrue(lines[0].endswith("w29"))
        self.assertEqual(lines[1], "[00:30] w30")

    def test_empty_word_list(self):
        self.assertEqual(normalizer.deepgram_to_transcript([]).render(), "")


@pytest.mark.unit
class TestAssemblyToTranscript(unittest.TestCase):
    """Test assembly_to_transcript (times in milliseconds)."""

    def setUp(self):
        self.utterances = {
            "utterances": [
                {"speaker": "A", "start": 0, "text": "Hi there."},
                {"speaker": "B", "start": 65_400, "text": "Hello."},
            ],
            "words": [{"text": "ignored", "start": 0}],
            "text": "ignored",
        }

    def test_utterances_with_speaker_labels(self):
        self.assertEqual(
            normalizer.assembly_to_transcript(self.utterances, speaker_labels=True).render(),
            "Speaker A (00:00): Hi there.\nSpeaker B (01:05): Hello.",
        )

    def test_utterances_without_speaker_labels(self):
        """The speaker prefix is dropped when labels were not requested."""
        self.assertEqual(
            normalizer.assembly_to_transcript(self.utterances, speaker_labels=False).render(),
            "(00:00): Hi there.\n(01:05): Hello.",
        )

    def test_utterance_without_speaker_has_no_prefix(self):
        payload = {
            "utterances": [
                {"start": 1000, "text": "Nobody identified."},
                {"speaker": None, "start": 2000, "text": "Still nobody."},
                {"speaker": "B", "start": 3000, "text": "Me."},
            ]
        }
        self.assertEqual(
            normalizer.assembly_to_transcript(payload, speaker_labels=True).render(),
            "(00:01): Nobody identified.\n(00:02): Still nobody.\nSpeaker B (00:03): Me.",
        )

    def test_words_packed_into_short_lines(self):
        """Without utterances, words are packed into lines of at most 80 characters."""
        words = [{"text": f"word{i:02d}", "start": i * 1000} for i in range(40)]
        lines = normalizer.assembly_to_transcript({"words": words}, False).render().splitlines()
        self.assertGreater(len(lines), 1)
        self.assertTrue(lines[0].startswith("[00:00] word00"))
        for line in lines:
            body = line.split("] ", 1)[1]
            self.assertLessEqual(len(body), normalizer.ASSEMBLY_MAX_LINE_CHARS)
        all_words = " ".join(line.split("] ", 1)[1] for line in lines).split()
        self.assertEqual(all_words, [w["text"] for w in words])

    def test_text_fallback(self):
        transcript = normalizer.assembly_to_transcript({"text": "Just text."}, False)
        self.assertEqual(transcript.render(), "Just text.")

    def test_nothing_available(self):
        transcript = normalizer.assembly_to_transcript({}, False)
        self.assertEqual(transcript.render(), normalizer.NO_TRANSCRIPTION_TEXT)
