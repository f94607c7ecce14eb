from injurybot.markdown import render


def test_empty():
    assert render("") == ""


def test_bold_is_wrapped_in_paragraph():
    assert render("**hi**") == "<p><strong>hi</strong></p>"
    assert render("__hi__") == "<p><strong>hi</strong></p>"


def test_italic_after_bold():
    assert render("**a** and *b* and _c_") == "<p><strong>a</strong> and <em>b</em> and <em>c</em></p>"


def test_bullets_become_one_list():
    assert render("- one\n- two\n• three") == "<ul><li>one</li><li>two</li><li>three</li></ul>"


def test_numbered_list_collapses_to_unordered():
    assert render("1. one\n2. two") == "<ul><li>one</li><li>two</li></ul>"


def test_list_after_text():
    assert render("Steps:\n- one\n- two") == "<p>Steps:<br><ul><li>one</li><li>two</li></ul></p>"


def test_line_breaks():
    assert render("a\nb") == "<p>a<br>b</p>"
    assert render("a\n\nb") == "<p>a<br><br>b</p>"
    assert render("a\n\n\n\nb") == "<p>a</p><p>b</p>"


def test_existing_markup_is_untouched():
    text = (
        'See <a href="/a.html" target="_blank">a</a> and '
        '<a href="/b.html" target="_blank">b</a>'
    )
    assert render(text) == f"<p>{text}</p>"


def test_bold_around_link():
    out = render('**<a href="/a.html" target="_blank">a</a>**')
    assert out == '<p><strong><a href="/a.html" target="_blank">a</a></strong></p>'


def test_nul_sequences_pass_through():
    assert render("a\x000\x00b") == "<p>a\x000\x00b</p>"


def test_nul_sequences_do_not_displace_tags():
    text = '\x000\x00 <a href="/x.html" target="_blank">x</a>'
    out = render(text)
    assert out == f"<p>{text}</p>"
    assert out.count("<a ") == 1
