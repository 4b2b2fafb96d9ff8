"""Root test configuration: a small exported help site on disk"""

from pathlib import Path

import pytest


TOPIC_HTML = """\
<?xml version="1.0" encoding="utf-8"?>
<html xmlns:MadCap="http://www.madcapsoftware.com/Schemas/MadCap.xsd" data-mc-search-type="Stem">
    <head><title>Supported software</title>
        <script src="../../Resources/Scripts/require.min.js"></script>
        <style>body { color: red; }</style>
    </head>
    <body>
        <h1 class="Heading1">Supported software</h1>
        <p>See <MadCap:xref href="Install.htm">Installing</MadCap:xref> first.</p>
        <MadCap:snippetBlock src="../../Resources/Snippets/Note.flsnp" />
        <p><MadCap:conditionalText MadCap:conditions="Default.Print">Printed manuals ship separately.</MadCap:conditionalText></p>
        <p>Click <b>Save</b> to
            continue.</p>
        <p><img src="../../Resources/Images/screen.png" /></p>
        <p> </p>
    </body>
</html>
"""

NOTE_SNIPPET = """\
<?xml version="1.0" encoding="utf-8"?>
<html xmlns:MadCap="http://www.madcapsoftware.com/Schemas/MadCap.xsd">
    <head></head>
    <body>
        <p class="Note">Remember to <b>save</b> often.</p>
    </body>
</html>
"""

INSTALL_HTML = """\
<html><head><title>Installing</title></head>
<body><h1>Installing</h1><p>Run the installer.</p></body></html>
"""


@pytest.fixture(name="site_root")
def site_root_fixture(tmp_path) -> Path:
    """public/ tree with one locale, two topics, a snippet and a project file."""
    root = tmp_path / "public"
    files = {
        "en/Content/Explore/Supported.htm": TOPIC_HTML,
        "en/Content/Explore/Install.htm": INSTALL_HTML,
        "en/Resources/Snippets/Note.flsnp": NOTE_SNIPPET,
        "en/Content/Resources/Stray.htm": "<html><body><p>not a topic</p></body></html>",
        "es/Readme.txt": "no Content folder here",
    }
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root
