# tests/test_tokenizer.py
from app.services.tokenizer import STOP_WORDS, iter_terms, prepare_search_terms


def test_lowercases_and_splits_on_whitespace_commas_and_semicolons():
    assert prepare_search_terms("  Laptop,USB;Stand\tBlack\nCable ") == [
        "laptop", "usb", "stand", "black", "cable",
    ]


def test_drops_short_tokens_and_stop_words():
    assert prepare_search_terms("I want to buy a laptop stand please") == ["laptop", "stand"]


def test_all_stop_words_fall_back_to_whole_text():
    assert prepare_search_terms("the a of") == ["the a of"]


def test_empty_text_falls_back_to_single_empty_term():
    assert prepare_search_terms("") == [""]
    assert prepare_search_terms("   ") == [""]


def test_fallback_is_trimmed_and_lowercased():
    assert prepare_search_terms("  The A x ") == ["the a x"]


def test_two_letter_words_survive():
    assert prepare_search_terms("  Give ME x ") == ["me"]


def test_never_empty():
    for text in ["", "a", "to be", ",;,", "x y z", "Please"]:
        assert prepare_search_terms(text)


def test_iter_terms_is_restartable_per_call():
    assert list(iter_terms("red shoes")) == list(iter_terms("red shoes")) == ["red", "shoes"]


def test_request_framing_verbs_are_stop_words():
    for verb in ("want", "need", "buy", "like", "please", "give"):
        assert verb in STOP_WORDS
