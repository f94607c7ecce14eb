from injurybot.safety import BANNED_TOPICS, is_banned


def test_clean_text_passes():
    assert not is_banned("Mesothelioma is a cancer linked to asbestos exposure.")


def test_banned_term_any_case():
    assert is_banned("You could win the LOTTERY")
    assert is_banned("lottery")


def test_banned_term_inside_other_word():
    assert is_banned("Welcome to Lotteryville")


def test_empty_text():
    assert not is_banned("")


def test_terms_are_lowercase():
    assert all(term == term.lower() for term in BANNED_TOPICS)
