# preprocess/alert_parser.py
import re

from ..models import ExtractedSignal
from .text_cleaner import extract_text

MONTHS = ("January|February|March|April|May|June|July|August|"
          "September|October|November|December")

# Ordered most specific first. The trailing \b keeps "level 10" from reading as 1.
LEVEL_RULES = (
    ("explicit", re.compile(r"alert\s*level\s*:?\s*(\d)\b", re.I)),
    ("status-verb", re.compile(r"level\s*(\d)\b\s*(?:is|has been|remains|was)", re.I)),
    ("raised", re.compile(r"raised.*?level\s*(\d)\b", re.I)),
    ("lowered", re.compile(r"lowered.*?level\s*(\d)\b", re.I)),
    ("maintains", re.compile(r"maintains.*?level\s*(\d)\b", re.I)),
)

DATE_RULES = (
    ("month-name", re.compile(rf"(\d{{1,2}}\s+(?:{MONTHS})\s+\d{{4}})", re.I)),
    ("numeric", re.compile(r"(?:as of|dated?|updated?)\s*:?\s*(\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4})", re.I)),
)


def volcano_rule(volcano):
    return ("volcano-name", re.compile(rf"{re.escape(volcano)}.*?level\s*(\d)\b", re.I))


def find_level(text, rules):
    """First rule whose first match captures a digit in 0..5."""
    for _name, pattern in rules:
        m = pattern.search(text)
        if not m:
            continue
        level = int(m.group(1))
        if 0 <= level <= 5:
            return level
    return None


def find_date(text, rules=DATE_RULES):
    for _name, pattern in rules:
        m = pattern.search(text)
        if m:
            return m.group(1)
    return None


class AlertExtractor:
    """Pulls an alert level and a bulletin date out of raw bulletin HTML."""

    def __init__(self, volcano="Mayon", level_rules=None, date_rules=DATE_RULES):
        if level_rules is None:
            level_rules = LEVEL_RULES + (volcano_rule(volcano),)
        self.level_rules = tuple(level_rules)
        self.date_rules = tuple(date_rules)

    def extract(self, raw_html, section_heading=None):
        text = extract_text(raw_html, section_heading)
        return ExtractedSignal(
            level=find_level(text, self.level_rules),
            date=find_date(text, self.date_rules),
        )
