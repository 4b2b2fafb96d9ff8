"""Code block classification: wrap <pre><code> blocks and guess their language"""

from __future__ import annotations

import html as _html
import re
from typing import Callable, NamedTuple

from docportal.core.passes import PassContext


class LanguageRule(NamedTuple):
    matches: Callable[[str], bool]
    language: str


def _contains_any(*needles: str) -> Callable[[str], bool]:
    return lambda code: any(n in code for n in needles)


# Evaluated top to bottom; first match wins.
LANGUAGE_RULES: list[LanguageRule] = [
    LanguageRule(_contains_any('function', 'const ', 'let ', 'var '), 'javascript'),
    LanguageRule(lambda c: c.startswith('{') and c.endswith('}'), 'json'),
    LanguageRule(lambda c: '<' in c and '>' in c, 'html'),
    LanguageRule(lambda c: '{' in c and '}' in c and ':' in c, 'css'),
    LanguageRule(lambda c: c.startswith(('$', '#')) or 'curl ' in c or 'npm ' in c, 'bash'),
    LanguageRule(lambda c: _contains_any('select ', 'from ', 'where ')(c.lower()), 'sql'),
    LanguageRule(_contains_any('def ', 'import ', 'print('), 'python'),
]
DEFAULT_LANGUAGE = 'text'

CODE_BLOCK_WRAPPER = '<div class="code-block syntax-highlighted">'

_TAGS_RE = re.compile(r'<[^>]+>')
_LANGUAGE_CLASS_RE = re.compile(r'''class\s*=\s*(?:["'][^"']*)?\blanguage-''', re.I)
_CLASS_ATTR_RE = re.compile(r'''\s+class\s*=\s*(?:"[^"]*"|'[^']*'|[^\s"'=<>`]+)''', re.I)
_PRE_CODE_RE = re.compile(
    r'(?<!' + re.escape(CODE_BLOCK_WRAPPER) + r')'
    r'<pre\b([^>]*)>\s*<code\b([^>]*)>(.*?)</code\s*>\s*</pre\s*>',
    re.I | re.S,
)
_BARE_CODE_RE = re.compile(r'<code\s*>', re.I)


def code_text(code_html: str) -> str:
    """Plain text of a code fragment: tags dropped, entities decoded, trimmed."""
    return _html.unescape(_TAGS_RE.sub('', code_html)).strip()


def detect_language(code_html: str, rules: list[LanguageRule] = LANGUAGE_RULES) -> str:
    code = code_text(code_html)
    for rule in rules:
        if rule.matches(code):
            return rule.language
    return DEFAULT_LANGUAGE


def _code_block(m: re.Match) -> str:
    pre_attrs, code_attrs, code = m.groups()
    if not _LANGUAGE_CLASS_RE.search(code_attrs):
        code_attrs = _CLASS_ATTR_RE.sub('', code_attrs) + f' class="language-{detect_language(code)}"'
    return f'{CODE_BLOCK_WRAPPER}<pre{pre_attrs}><code{code_attrs}>{code}</code></pre></div>'


def classify_code_blocks(html: str, ctx: PassContext = None) -> str:
    """Wrap preformatted code in a highlighted block; tag remaining bare <code> as inline."""
    html = _PRE_CODE_RE.sub(_code_block, html)
    return _BARE_CODE_RE.sub('<code class="inline-code syntax-highlighted">', html)
