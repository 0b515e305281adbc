"""
Structured creative fields from free-form generated text.

The parser is the only boundary between the text generator and structured
data. Contract: parse() never raises; unmatched fields stay empty strings.
"""
from dataclasses import dataclass, asdict
from typing import List, Optional, Tuple


@dataclass
class ParsedCreative:
    """Creative fields extracted from generated text"""

    headline: str = ""
    ad_copy: str = ""
    call_to_action: str = ""
    visual_direction: str = ""
    target_audience: str = ""
    hypothesis: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


class ResponseParser:
    """Interface for turning generated text into a ParsedCreative"""

    def parse(self, text: Optional[str]) -> ParsedCreative:
        raise NotImplementedError


# Checked in order; the first section whose keyword appears in a line wins
SECTION_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("headline", ("headline",)),
    ("ad_copy", ("copy", "description")),
    ("call_to_action", ("call", "cta")),
    ("visual_direction", ("visual", "image")),
    ("target_audience", ("target", "audience")),
    ("hypothesis", ("hypothesis", "test")),
]


class KeywordResponseParser(ResponseParser):
    """
    Line based keyword matcher.

    A line containing a section keyword (case-insensitive) starts that section;
    the text after its first colon is the initial value. Following lines without
    a keyword are appended, space separated, to the active section.
    """

    def __init__(self, sections: List[Tuple[str, Tuple[str, ...]]] = None):
        self.sections = sections or SECTION_KEYWORDS

    def _match_section(self, line: str) -> Optional[str]:
        lower_line = line.lower()
        for field_name, keywords in self.sections:
            if any(keyword in lower_line for keyword in keywords):
                return field_name
        return None

    @staticmethod
    def _section_value(line: str) -> str:
        _, sep, rest = line.partition(":")
        value = rest.strip() if sep else ""
        return value or line.strip()

    def parse(self, text: Optional[str]) -> ParsedCreative:
        creative = ParsedCreative()
        if not isinstance(text, str) or not text:
            return creative

        current_section = None
        for raw_line in text.splitlines():
            line = raw_line.strip()
            if not line:
                continue

            section = self._match_section(line)
            if section:
                current_section = section
                setattr(creative, section, self._section_value(line))
            elif current_section:
                existing = getattr(creative, current_section)
                setattr(creative, current_section, f"{existing} {line}".strip())

        return creative
