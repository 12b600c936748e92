"""
Text Cleaning - Transform Layer

govInfo serves the text rendition of bills and granules as HTML with the
document inside a single <pre> block. These helpers strip the markup.
"""

import re

from bs4 import BeautifulSoup

_TRAILING_WS = re.compile(r"[ \t]+$", re.MULTILINE)
_BLANK_RUNS = re.compile(r"\n{3,}")


def html_to_text(html: str) -> str:
    """
    Extract plain text from a govInfo htm download

    Uses the <pre> blocks when present (the document body as published),
    otherwise all visible text. Line endings are normalized to "\\n",
    trailing spaces removed and runs of blank lines collapsed to one.
    """
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()

    blocks = soup.find_all("pre")
    if blocks:
        text = "\n".join(block.get_text() for block in blocks)
    else:
        text = soup.get_text("\n")

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _TRAILING_WS.sub("", text)
    text = _BLANK_RUNS.sub("\n\n", text)
    return text.strip() + "\n" if text.strip() else ""
