import logging

import pytest

from text_ranker.datatypes import RankConfig
from text_ranker.preprocessing import SegmentationError
from text_ranker.summarize import (
    generate_summary,
    new_document,
    select_sentences,
    summarize,
    summarize_many,
    word_budget,
)

PETS = "Cats are mammals. Dogs are mammals. The stock market rose today."

ARTICLE = """
The city council approved a new budget for public transport on Monday.
The budget adds twenty new buses and extends the tram line to the airport.
Council members said public transport ridership grew by ten percent last year.
A local bakery won a regional award for its sourdough bread.
Critics argued the transport budget ignores cycling infrastructure.
The new buses are expected to enter service in the spring.
Transport officials will publish a detailed timetable for the tram extension next month.
"""


def test_scenario_mammals_rank_first():
    doc = new_document(PETS)
    assert doc.total_word_count == 11
    assert word_budget(doc, 0.34) == 4
    assert generate_summary(doc, 0.34) == "Cats are mammals."


def test_full_fraction_keeps_original_order():
    assert summarize(PETS, 1.0) == PETS


def test_sentence_budget_variant():
    config = RankConfig(budget="sentences")
    assert summarize(PETS, 0.67, config=config) == "Cats are mammals. Dogs are mammals."
    assert summarize(PETS, 0.0, config=config) == "Cats are mammals."


@pytest.mark.parametrize("fraction", [0.0, 0.1, 0.5, 1.0])
def test_single_sentence_returned_verbatim(fraction):
    text = "Only one sentence lives here."
    assert summarize(text, fraction) == text


def test_empty_input_gives_empty_summary():
    doc = new_document("")
    assert doc.sentences == []
    assert generate_summary(doc, 0.5) == ""
    assert summarize("   \n\t ", 0.5) == ""


def test_summary_is_idempotent():
    doc = new_document(ARTICLE)
    assert generate_summary(doc, 0.3) == generate_summary(doc, 0.3)


def test_output_grows_with_fraction():
    doc = new_document(ARTICLE)
    lengths = [len(generate_summary(doc, f / 20).split()) for f in range(21)]
    assert lengths == sorted(lengths)
    assert generate_summary(doc, 1.0) == " ".join(s.text for s in doc.sentences)


def test_selection_is_in_document_order():
    doc = new_document(ARTICLE)
    selected = select_sentences(doc, 0.4)
    assert selected == sorted(selected)
    assert sum(doc.sentences[i].word_count for i in selected) <= word_budget(doc, 0.4) or len(selected) == 1


def test_first_sentence_accepted_even_over_budget():
    doc = new_document("A very long opening sentence with many words in it. Short one.")
    assert len(select_sentences(doc, 0.01)) == 1


def test_punctuation_only_sentence_does_not_crash():
    doc = new_document("Cats are mammals. ?!... Dogs are mammals.")
    assert doc.sentences[1].word_count == 0
    assert doc.sentences[1].score == pytest.approx(1 - doc.config.damping_factor)
    assert "?!..." not in generate_summary(doc, 0.5)


def test_raw_text_whitespace_is_collapsed():
    assert summarize("Cats\tare\n mammals.", 1.0) == "Cats are mammals."


def test_lemmatization_links_inflected_forms():
    text = "The cat runs home. A dog sleeps. The cats ran home."
    lemmas = {"cats": "cat", "ran": "run", "runs": "run"}
    doc = new_document(text, lemma_dict=lemmas)
    assert doc.sentences[0].words == doc.sentences[2].words
    assert doc.graph.weight(0, 2) > new_document(text).graph.weight(0, 2)


def test_lemma_path_from_config(tmp_path):
    path = tmp_path / "lemmas.txt"
    path.write_text("cat\tcats\n", encoding="utf-8")
    doc = new_document("The cats purr loudly.", config=RankConfig(lemma_path=str(path)))
    assert doc.sentences[0].words == ["cat", "loudly", "purr", "the"]


def test_missing_lemma_path_degrades_gracefully(tmp_path, caplog):
    config = RankConfig(lemma_path=str(tmp_path / "nope.txt"))
    with caplog.at_level(logging.WARNING, logger="text_ranker.summarize"):
        doc = new_document("The cats purr loudly.", config=config)
    assert doc.sentences[0].words == ["cats", "loudly", "purr", "the"]
    assert "without lemmatization" in caplog.text


def test_segmentation_failure_propagates():
    with pytest.raises(SegmentationError):
        summarize(b"\xff\xfe broken", 0.5)


def test_invalid_fraction():
    doc = new_document(PETS)
    with pytest.raises(ValueError):
        generate_summary(doc, 1.5)
    with pytest.raises(ValueError):
        summarize(PETS, -0.1)


def test_custom_segmenter():
    text = "first part about cats | second part about cats | unrelated bit"
    doc = new_document(text, segmenter=lambda t: t.split("|"))
    assert [s.text for s in doc.sentences] == [
        "first part about cats", "second part about cats", "unrelated bit"]


def test_summarize_many(caplog):
    texts = [PETS, b"\xff\xfe broken", "One sentence."]
    with caplog.at_level(logging.ERROR, logger="text_ranker.summarize"):
        results = summarize_many(texts, 0.34, max_workers=2)
    assert results == ["Cats are mammals.", None, "One sentence."]
    assert "Skipping document" in caplog.text


def test_summarize_many_matches_single_runs():
    texts = [ARTICLE, PETS, ARTICLE.upper()]
    lemmas = {"buses": "bus"}
    assert summarize_many(texts, 0.3, lemma_dict=lemmas) == [
        summarize(t, 0.3, lemma_dict=lemmas) for t in texts]
