"""Unit tests for sidecar entry extraction.

WHY: The extracted entry is what downstream tools read. The parallel
text/timing lists must line up one-to-one, and the scalar-vs-list timing
rule for single-word utterances is easy to get backwards.

HOW: Uses the shared DONE_RESPONSE sample plus small hand-built outputs.
"""

import pytest

from gladia_batch.api.models import TranscriptionOutput, Utterance, Word
from gladia_batch.core.extractor import OutputFormat, extract


def _output(*utterances):
    return TranscriptionOutput(utterances=list(utterances))


class TestUtteranceShape:
    """Default shape: one text and one timing entry per utterance."""

    def test_sample_response(self, done_status):
        result = extract("interview.mp3", done_status.result)

        assert result == {
            "interview.mp3": {
                "startTimes": [[0.5, 0.9, 1.3], 2.1],
                "text": ["Hello there friend", "Yes"],
            }
        }

    def test_multi_word_utterance_gets_list_of_word_starts(self):
        utt = Utterance(text="a b c", start=9.0, words=[Word("a", 1.0), Word("b", 2.0), Word("c", 3.0)])

        entry = extract("f", _output(utt))["f"]

        assert entry["startTimes"] == [[1.0, 2.0, 3.0]]

    def test_single_word_utterance_gets_utterance_start(self):
        utt = Utterance(text="hi", start=4.2, words=[Word("hi", 4.25)])

        entry = extract("f", _output(utt))["f"]

        assert entry["startTimes"] == [4.2]

    def test_utterance_without_words_gets_utterance_start(self):
        entry = extract("f", _output(Utterance(text="...", start=7.0)))["f"]

        assert entry["startTimes"] == [7.0]

    def test_text_and_timing_have_equal_length(self, done_status):
        entry = extract("x", done_status.result)["x"]

        assert len(entry["text"]) == len(entry["startTimes"])

    def test_empty_transcription(self):
        assert extract("f", _output()) == {"f": {"startTimes": [], "text": []}}


class TestWordShape:
    """Legacy shape: flat words, two-decimal starts, joined strings."""

    def test_sample_response(self, done_status):
        result = extract("interview.mp3", done_status.result, OutputFormat.WORDS)

        assert result == {
            "interview.mp3": {
                "words": {"Hello": "0.50", "there": "0.90", "friend": "1.30", "Yes": "2.12"},
                "text": "Hello there friend Yes",
                "startTimes": "0.50 0.90 1.30 2.12",
            }
        }

    def test_duplicate_words_keep_last_start(self):
        utt = Utterance(text="go go", start=0.0, words=[Word("go", 1.0), Word("go", 2.5)])

        entry = extract("f", _output(utt), OutputFormat.WORDS)["f"]

        assert entry["words"] == {"go": "2.50"}
        assert entry["text"] == "go go"
        assert entry["startTimes"] == "1.00 2.50"

    def test_word_count_matches_time_count(self, done_status):
        entry = extract("x", done_status.result, OutputFormat.WORDS)["x"]

        assert len(entry["text"].split(" ")) == len(entry["startTimes"].split(" "))


@pytest.mark.parametrize("fmt", list(OutputFormat))
def test_result_has_single_key(done_status, fmt):
    assert list(extract("only.mp3", done_status.result, fmt)) == ["only.mp3"]
