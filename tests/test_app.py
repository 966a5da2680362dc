import io
import logging

import matplotlib
matplotlib.use("Agg")

from main import draw_graph_visualization, extract_markdown_text, extract_rtf_text, load_text_from_file
from text_ranker.summarize import log_graph, new_document, select_sentences


class FakeUpload(io.BytesIO):
    def __init__(self, name, data):
        super().__init__(data)
        self.name = name


def test_extract_markdown_text():
    md = "# Title\nSome **bold** text with a [link](http://x).\n```\ncode\n```\nEnd `x`."
    assert extract_markdown_text(md) == "Title\nSome bold text with a link.\n\nEnd x."


def test_extract_rtf_text():
    assert extract_rtf_text(r"{\rtf1\ansi Hello \b world\b0 .}") == "Hello world ."


def test_load_text_from_file():
    upload = FakeUpload("notes.md", "## Cats\nCats are **mammals**.".encode("utf-8"))
    assert load_text_from_file(upload) == "Cats\nCats are mammals."
    assert load_text_from_file(FakeUpload("a.txt", b"plain text")) == "plain text"


def test_draw_graph_visualization():
    doc = new_document("Cats are mammals. Dogs are mammals. The stock market rose today.")
    buf = draw_graph_visualization(doc, select_sentences(doc, 0.34))
    assert buf.read(8) == b"\x89PNG\r\n\x1a\n"


def test_log_graph(caplog):
    doc = new_document("Cats are mammals. Dogs are mammals.")
    with caplog.at_level(logging.DEBUG, logger="text_ranker.summarize"):
        log_graph(doc)
    assert "Node number 1 with score" in caplog.text
