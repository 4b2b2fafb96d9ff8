"""Unit tests for core/passes.py"""

import pytest

from docportal.core.passes import (
    PassContext,
    collapse_inline_breaks,
    get_attr,
    is_marker_class,
    normalize_block_spacing,
    remove_empty_containers,
    repair_legacy_tags,
    resolve_conditional_text,
    resolve_cross_references,
    resolve_image_paths,
    strip_classes,
    strip_executable,
    strip_vendor_attributes,
)


# --- strip_executable ---

def test_strip_executable_removes_script_and_style():
    """Script and style elements go, content included, in any case."""
    html = '<p>a</p><script type="text/javascript">var x = "<p>";</script><STYLE>p{}</STYLE><p>b</p>'
    assert strip_executable(html) == "<p>a</p><p>b</p>"


def test_strip_executable_self_closing_script():
    assert strip_executable('<script src="x.js"/><p>a</p>') == "<p>a</p>"


# --- resolve_cross_references ---

def test_xref_becomes_internal_link():
    html = 'See <MadCap:xref href="Install.htm#step">Installing</MadCap:xref>.'
    assert resolve_cross_references(html) == 'See <a href="Install.htm#step" class="internal-link">Installing</a>.'


def test_xref_extra_attributes_dropped():
    html = '<MadCap:xref class="x" href="a.htm" target="_blank">Go</MadCap:xref>'
    assert resolve_cross_references(html) == '<a href="a.htm" class="internal-link">Go</a>'


def test_xref_without_href_is_broken_link():
    assert resolve_cross_references("<MadCap:xref>Orphan</MadCap:xref>") == '<span class="broken-link">Orphan</span>'


def test_xref_survives_vendor_cleanup_only_when_resolved_first():
    """Vendor cleanup deletes an unresolved cross-reference outright."""
    html = '<MadCap:xref href="a.htm">A</MadCap:xref>'
    assert resolve_conditional_text(html) == ""
    assert "a.htm" in resolve_conditional_text(resolve_cross_references(html))


# --- resolve_conditional_text ---

def test_conditional_text_unwrapped():
    html = '<p><MadCap:conditionalText MadCap:conditions="Default.Print">Shown</MadCap:conditionalText></p>'
    assert resolve_conditional_text(html) == "<p>Shown</p>"


def test_nested_conditional_text_unwrapped():
    html = (
        '<MadCap:conditionalText data-x="a">A '
        '<MadCap:conditionalText>B</MadCap:conditionalText>'
        ' C</MadCap:conditionalText>'
    )
    assert resolve_conditional_text(html) == "A B C"


def test_other_vendor_elements_deleted():
    """Unknown vendor elements are dropped with their content."""
    html = (
        '<p>x<MadCap:keyword term="k" />y'
        '<MadCap:dropDown><MadCap:dropDownHead>H</MadCap:dropDownHead></MadCap:dropDown>z</p>'
    )
    assert resolve_conditional_text(html) == "<p>xyz</p>"


def test_stray_vendor_tag_removed():
    assert resolve_conditional_text("a</MadCap:conditionalText>b") == "ab"


# --- strip_vendor_attributes ---

def test_vendor_attributes_removed():
    html = '<p MadCap:autonum="1" data-mc-conditions="Print" xmlns:MadCap="http://x" id="keep">T</p>'
    assert strip_vendor_attributes(html) == '<p id="keep">T</p>'


def test_vendor_attribute_text_outside_tags_untouched():
    """Attribute-like prose is not inside a tag, so it stays."""
    html = '<p>use data-mc-foo="x" here</p>'
    assert strip_vendor_attributes(html) == html


def test_vendor_attributes_self_closing_tail_kept():
    assert strip_vendor_attributes('<img src="a.png" data-mc-x="1" />') == '<img src="a.png" />'


# --- strip_classes ---

def test_strip_classes_keeps_markers_only():
    html = (
        '<p class="Note"><a href="x" class="internal-link">x</a>'
        '<span class="bold-text extra">y</span><code class="language-python">z</code></p>'
    )
    assert strip_classes(html) == (
        '<p><a href="x" class="internal-link">x</a>'
        '<span>y</span><code class="language-python">z</code></p>'
    )


@pytest.mark.parametrize("value,expected", [
    ("anchor", True),
    ("code-block syntax-highlighted", True),
    ("language-bash", True),
    ("anchor Heading1", False),
    ("", False),
])
def test_is_marker_class(value, expected):
    assert is_marker_class(value) is expected


# --- repair_legacy_tags ---

@pytest.mark.parametrize("html,expected", [
    ("<>Lost link</></a>", '<span class="broken-link">Lost link</span>'),
    ('<a name="top"></a>', '<span id="top" class="anchor"></span>'),
    ('<b style="font-style: italic;">Note</b>', "<em>Note</em>"),
    ("<i>a</i> <b>b <i>c</i></b>", '<em>a</em> <span class="bold-text">b <em>c</em></span>'),
    ("<u>under</u>", '<span style="text-decoration: underline;">under</span>'),
    ("<b>a <b>b</b> c</b>", '<span class="bold-text">a <span class="bold-text">b</span> c</span>'),
    ("<i>x <i>y</i></i>", "<em>x <em>y</em></em>"),
    ('<a name="intro">Introduction</a>', '<span id="intro" class="anchor"></span>Introduction'),
    ('<img src="/a.png"></img>', '<img src="/a.png">'),
    ("a< />b", "ab"),
    ("<br>", "<br />"),
    ("<BR/>", "<br />"),
])
def test_repair_legacy_tags(html, expected):
    assert repair_legacy_tags(html) == expected


def test_iframe_wrapped_once():
    """Embedded video gets one responsive wrapper, even when repaired twice."""
    html = '<iframe src="https://www.youtube.com/embed/x" allowfullscreen></iframe>'
    expected = (
        '<div class="video-container">'
        '<iframe src="https://www.youtube.com/embed/x" allowfullscreen></iframe></div>'
    )
    once = repair_legacy_tags(html)
    assert once == expected
    assert repair_legacy_tags(once) == expected


# --- resolve_image_paths ---

def test_resolve_image_paths():
    """Relative sources are anchored at the document; absolute and external ones stay."""
    ctx = PassContext(anchor_path="/en/Content/Topics/T.htm")
    html = '<p><img alt="x" src="../Images/a.png" /><img src="https://e.com/b.png"><img src="/abs/c.png"></p>'
    assert resolve_image_paths(html, ctx) == (
        '<p><img alt="x" src="/en/Content/Images/a.png" />'
        '<img src="https://e.com/b.png"><img src="/abs/c.png"></p>'
    )


def test_resolve_image_paths_ignores_data_src(ctx):
    html = '<img data-src="lazy.png">'
    assert resolve_image_paths(html, ctx) == html


# --- normalize_block_spacing ---

def test_block_spacing():
    html = "<h1>T</h1><p>a</p><ul><li>x</li><li>y</li></ul><p>b</p>"
    assert normalize_block_spacing(html) == (
        "<h1>T</h1>\n\n<p>a</p>\n\n<ul><li>x</li>\n<li>y</li></ul>\n\n<p>b</p>"
    )


def test_block_spacing_no_break_before_parent_close():
    """A close followed directly by its parent's close stays tight."""
    assert normalize_block_spacing("<div><p>a</p>\n\n  </div>") == "<div><p>a</p></div>"


def test_block_spacing_horizontal_rule():
    assert normalize_block_spacing("<p>a</p><hr><p>b</p>") == "<p>a</p>\n<hr />\n\n<p>b</p>"


def test_block_spacing_preserves_pre():
    """Whitespace inside <pre> is content and is never reflowed."""
    html = "<pre>  line1\n\n\n    line2</pre><p>x   y</p>"
    assert normalize_block_spacing(html) == "<pre>  line1\n\n\n    line2</pre>\n\n<p>x y</p>"


def test_block_spacing_is_stable():
    html = "<h2>T</h2><p>a</p><table><tr><td>1</td></tr></table>"
    once = normalize_block_spacing(html)
    assert normalize_block_spacing(once) == once


# --- collapse_inline_breaks ---

@pytest.mark.parametrize("html,expected", [
    ('<p>Hello\n<span class="bold-text">world</span></p>', '<p>Hello <span class="bold-text">world</span></p>'),
    ("one\ntwo", "one two"),
    ('see\n<a href="x">link</a>\nnow', 'see <a href="x">link</a> now'),
    ('<em>a</em>\n<em>b</em>', "<em>a</em> <em>b</em>"),
    ("text\n<img src=\"/x.png\">", 'text <img src="/x.png">'),
])
def test_collapse_inline_breaks(html, expected):
    assert collapse_inline_breaks(html) == expected


@pytest.mark.parametrize("html", [
    "<p>a</p>\n\n<p>b</p>",
    "<li>x</li>\n<li>y</li>",
    "para one\n\npara two",
    "line<br />\nnext",
    "<pre>a\nb</pre>",
])
def test_collapse_inline_breaks_leaves_structure(html):
    """Blank lines, breaks after block tags and <pre> content are kept."""
    assert collapse_inline_breaks(html) == html


# --- remove_empty_containers ---

def test_remove_empty_containers_innermost_first():
    html = "<p> </p><div>\n<p></p></div><p>kept</p>"
    assert remove_empty_containers(html) == "<p>kept</p>"


def test_remove_empty_containers_keeps_placeholders():
    html = '<div class="snippet-placeholder">\U0001F4C4 Snippet: x.flsnp</div>'
    assert remove_empty_containers(html) == html


def test_remove_empty_containers_joins_split_text():
    """Text split only by a removed container is rejoined as one run."""
    assert remove_empty_containers("a\n<div></div>\nb") == "a b"


# --- get_attr ---

def test_get_attr_quotes():
    assert get_attr(' src="a.htm"', "src") == "a.htm"
    assert get_attr(" src='b.htm'", "src") == "b.htm"
    assert get_attr(' data-src="c.htm"', "src") is None


def test_repair_legacy_tags_nested_is_stable():
    """Nested emphasis resolves innermost first, so a second repair changes nothing."""
    once = repair_legacy_tags("<p><u>x <u>y</u></u> <b style=\"font-style: italic;\">a <b>b</b></b></p>")
    assert once == (
        '<p><span style="text-decoration: underline;">x '
        '<span style="text-decoration: underline;">y</span></span> '
        '<em>a <span class="bold-text">b</span></em></p>'
    )
    assert repair_legacy_tags(once) == once


def test_named_anchor_with_href_left_alone():
    html = '<a name="x" href="y.htm">Go</a>'
    assert repair_legacy_tags(html) == html


# --- unquoted attribute values ---

def test_strip_classes_unquoted():
    assert strip_classes("<p class=Note>hi <span class=anchor></span></p>") == (
        "<p>hi <span class=anchor></span></p>"
    )


def test_resolve_image_paths_unquoted(ctx):
    """Unquoted sources are resolved too and written back quoted."""
    assert resolve_image_paths("<img src=images/x.png alt=x>", ctx) == (
        '<img src="/en/Content/Topics/images/x.png" alt=x>'
    )
    assert resolve_image_paths("<img src=/abs/y.png>", ctx) == "<img src=/abs/y.png>"
