# newsroom/tests/test_summarizer.py
import pytest

from newsroom.summarizer.news_summarizer import NewsSummarizer, score_sentences, split_sentences


def _long(word, n=20):
    return " ".join([word] * (n - 1)) + " end."


SIX = [
    "Short one.",
    "Short two.",
    "Short three.",
    _long("alpha"),
    _long("beta"),
    _long("gamma"),
]


def test_empty_and_whitespace():
    s = NewsSummarizer()
    assert s.summarize("") == ""
    assert s.summarize("   \n\t ") == ""
    assert s.summarize(None) == ""


def test_split_keeps_terminators():
    parts = split_sentences("Hello there! Is it me? Yes it is... trailing text")
    assert parts == ["Hello there!", " Is it me?", " Yes it is..."]


def test_short_circuit_returns_trimmed_text():
    text = "  First sentence. Second one!  Third?  "
    assert NewsSummarizer().summarize(text) == text.strip()


def test_text_without_terminator_is_returned_as_is():
    assert NewsSummarizer().summarize(" no punctuation here ") == "no punctuation here"


def test_selection_preserves_original_order():
    text = " ".join(SIX)
    out = NewsSummarizer().summarize(text)
    # scores: s3 (0.70) > s0 (0.64) > s4 (0.60); saída na ordem do texto
    assert out == " ".join([SIX[0], SIX[3], SIX[4]])


def test_tie_goes_to_earlier_sentence():
    # s0: 0.6*1.0 + 0.4*(1/20) == s1: 0.6*0.8 + 0.4*(7/20) == 0.62
    text = "A. b b b b b b b. c. d. e."
    scores = [s.score for s in score_sentences(split_sentences(text))]
    assert scores[0] == pytest.approx(0.62)
    assert scores[1] == pytest.approx(scores[0])
    assert NewsSummarizer().summarize(text, sentence_count=1) == "A."


def test_sentence_count_parameter():
    text = " ".join(SIX)
    out = NewsSummarizer().summarize(text, sentence_count=1)
    assert out == SIX[3]
    assert NewsSummarizer().summarize(text, sentence_count=6) == text.strip()


def test_deterministic():
    text = " ".join(SIX * 2)
    s = NewsSummarizer()
    assert s.summarize(text) == s.summarize(text)
