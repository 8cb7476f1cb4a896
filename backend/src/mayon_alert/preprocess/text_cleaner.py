# preprocess/text_cleaner.py
import re

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]


def clean_text(s):
    s = re.sub(r"\s+", " ", s).strip()
    return s


def parse_html(html):
    soup = BeautifulSoup(html or "", "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()
    return soup


def page_text(soup):
    """Plain text of the document body (or the whole document if there is no body)."""
    root = soup.body or soup
    return clean_text(root.get_text(" "))


def section_text(soup, heading):
    """Text of the single section whose heading mentions ``heading``.

    A section runs from the heading up to the next heading of the same or
    higher rank. Returns None unless exactly one heading matches.
    """
    needle = heading.lower()
    matches = [h for h in soup.find_all(HEADING_TAGS)
               if needle in h.get_text(" ", strip=True).lower()]
    if len(matches) != 1:
        return None

    head = matches[0]
    rank = int(head.name[1])
    parts = [head.get_text(" ")]
    for el in head.next_elements:
        if isinstance(el, Tag):
            if el.name in HEADING_TAGS and int(el.name[1]) <= rank:
                break
            continue
        if isinstance(el, NavigableString) and not any(p is head for p in el.parents):
            parts.append(str(el))
    return clean_text(" ".join(parts))


def extract_text(html, heading=None):
    soup = parse_html(html)
    if heading:
        narrowed = section_text(soup, heading)
        if narrowed:
            return narrowed
    return page_text(soup)
