"""HTML to plain text conversion for scraped pages."""

import re

from bs4 import BeautifulSoup, NavigableString

_SKIPPED_TAGS = [
    "nav", "img", "form", "button", "input", "select", "a",
    "script", "style", "noscript", "svg", "head",
]
_BLOCK_TAGS = [
    "p", "div", "section", "article", "header", "footer", "tr", "li",
    "h1", "h2", "h3", "h4", "h5", "h6", "blockquote", "pre", "table", "ul", "ol",
]


def html_to_text(html: str) -> str:
    """Convert page HTML to text, keeping only `<main>` when the page has one."""
    if not html:
        return ""

    soup = BeautifulSoup(html, "lxml")
    root = soup.find("main") or soup.find("body") or soup

    for tag in root.find_all(_SKIPPED_TAGS):
        tag.decompose()

    for br in root.find_all("br"):
        br.replace_with("\n")

    for tag in root.find_all(_BLOCK_TAGS):
        tag.insert(0, NavigableString("\n"))
        tag.append(NavigableString("\n"))

    for td in root.find_all(["td", "th"]):
        td.append(NavigableString("\t"))

    text = root.get_text()
    text = re.sub(r"[ \t\r\f\v]+", " ", text)
    text = re.sub(r" *\n *", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()
