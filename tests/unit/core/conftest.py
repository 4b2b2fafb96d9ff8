"""Shared fixtures for core unit tests"""

import pytest

from docportal.core.passes import PassContext
from docportal.core.store import MemoryStore


ANCHOR = "/en/Content/Topics/Topic.htm"


@pytest.fixture(name="ctx")
def ctx_fixture():
    return PassContext(anchor_path=ANCHOR)


@pytest.fixture(name="store")
def store_fixture():
    return MemoryStore({
        "/en/Content/Resources/Snippets/Foo.htm": "<html><body><p>Shared text</p></body></html>",
        "/en/Resources/Snippets/Product.flsnp": "<html><body><p>Acme Studio</p></body></html>",
        "/en/Resources/Snippets/Logo.flsnp": '<body><p><img src="../Images/logo.png" /></p></body>',
        "/en/Resources/Snippets/Outer.flsnp": (
            '<body><p>Outer</p><MadCap:snippetBlock src="Inner.flsnp" /></body>'
        ),
        "/en/Resources/Snippets/Inner.flsnp": "<body><p>Inner</p></body>",
        "/en/Resources/Snippets/Bare.flsnp": '<p class="Tip">No body tag</p><script>alert(1)</script>',
    })
