import pytest

from injurybot.linker import (
    ArticleLinker,
    LinkedText,
    annotate,
    check_phrase_priority,
    make_anchor,
)

MESO = '<a href="/mesothelioma.html" target="_blank">'


def test_introduced_topic_is_wrapped_once():
    out = annotate("Learn more about mesothelioma symptoms.")
    assert out == f"Learn more about {MESO}mesothelioma symptoms</a>."
    assert out.count("<a ") == 1


def test_later_patterns_skip_earlier_links():
    out = annotate("You can learn more about class action lawsuits.")
    assert out == (
        'You can learn more about <a href="/class-action.html" target="_blank">'
        "class action lawsuits</a>."
    )


def test_introduced_topic_uses_first_overlapping_key():
    out = annotate("For more information about asbestos related illnesses, call us.")
    assert out == f"For more information about {MESO}asbestos related illnesses</a>, call us."


def test_introduced_topic_without_mapping_is_left_alone():
    text = "Learn more about our team."
    assert annotate(text) == text


def test_literal_phrases_wrap_every_occurrence():
    out = annotate("Ovarian cancer and lymphoma. Lymphoma again.")
    assert out == (
        '<a href="/ovarian-cancer.html" target="_blank">Ovarian cancer</a> and '
        '<a href="/lymphoma.html" target="_blank">lymphoma</a>. '
        '<a href="/lymphoma.html" target="_blank">Lymphoma</a> again.'
    )


def test_literal_phrases_need_whole_words():
    assert annotate("lymphomas are varied") == "lymphomas are varied"


def test_longest_phrase_wins():
    out = annotate("Read about mesothelioma symptoms and diagnosis here")
    assert out == f"Read about {MESO}mesothelioma symptoms and diagnosis</a> here"


def test_existing_anchor_is_not_rewrapped():
    text = 'Read <a href="/x.html" target="_blank">about lymphoma</a> here'
    assert annotate(text) == text


def test_malformed_fragment_is_removed():
    assert annotate('Visit /guide.html" target="blank">the guide') == "Visit the guide"


def test_fragments_joined_by_removal_are_removed():
    assert annotate("see azz yy.html target=blank>.html target=blank> end") == "see end"


def test_no_match_is_identity():
    text = "Nothing to link here."
    assert annotate(text) == text
    assert annotate("") == ""


@pytest.mark.parametrize("text", [
    "Learn more about mesothelioma symptoms.",
    "For more information about legal options, see the guide.\nLearn more about lymphoma.",
    "You can read about compensation options and mass tort claims.",
    "Mesothelioma diagnosis takes time. More information on asbestos exposure risks.",
    "see azz yy.html target=blank>.html target=blank> end",
])
def test_annotate_is_idempotent(text):
    once = annotate(text)
    assert annotate(once) == once


def test_find_article_two_way():
    linker = ArticleLinker()
    assert linker.find_article("  Mass Tort cases ") == "/mass-tort.html"
    assert linker.find_article("signs") == "/mesothelioma.html"
    assert linker.find_article("") is None


def test_phrase_priority_is_checked():
    check_phrase_priority(["lymphoma treatment", "lymphoma"])
    with pytest.raises(ValueError):
        check_phrase_priority(["lymphoma", "lymphoma treatment"])
    with pytest.raises(ValueError):
        ArticleLinker(phrases=["asbestos", "asbestos exposure"])


def test_linked_text_shifts_existing_links():
    anchor = make_anchor("/a.html", "y")
    doc = LinkedText.parse(f"x {anchor} z")
    assert doc.links == ((2, 2 + len(anchor)),)

    edited = doc.apply([(0, 1, "xxx", False)])
    start, end = edited.links[0]
    assert edited.text[start:end] == anchor
    assert not edited.is_free(start, start + 1)
    assert edited.is_free(0, 3)
