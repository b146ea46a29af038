"""
Skill Taxonomy

Read-only mapping from skill name to its section and to the proficiency
level the company expects by default. Instances are passed explicitly to
the reconciliation and analytics code; nothing reads a global table.
"""
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from skillgap.core.exceptions import TaxonomyError
from skillgap.core.taxonomy_defaults import DEFAULT_EXPECTATIONS, DEFAULT_SECTIONS, OTHER_SECTION

logger = logging.getLogger(__name__)

OTHER = OTHER_SECTION["key"]


@dataclass(frozen=True)
class Section:
    key: str
    title: str
    short_label: str
    skills: Tuple[str, ...]


class SkillTaxonomy:
    def __init__(self, sections: Iterable[Section], expectations: Mapping[str, int]):
        self._sections: Tuple[Section, ...] = tuple(sections)
        self._section_by_key: Dict[str, Section] = {}
        self._section_of: Dict[str, str] = {}

        for section in self._sections:
            if section.key == OTHER or section.key in self._section_by_key:
                raise TaxonomyError(f"Duplicate or reserved section key: {section.key!r}")
            self._section_by_key[section.key] = section
            for skill in section.skills:
                owner = self._section_of.get(skill)
                if owner is not None:
                    raise TaxonomyError(
                        f"Skill {skill!r} is listed in both {owner!r} and {section.key!r}"
                    )
                self._section_of[skill] = section.key

        for skill, level in expectations.items():
            if not isinstance(level, int) or not 1 <= level <= 5:
                raise TaxonomyError(f"Default expectation for {skill!r} must be 1-5, got {level!r}")
        self._expectations: Dict[str, int] = dict(expectations)

    @classmethod
    def default(cls) -> "SkillTaxonomy":
        return cls.from_dict({"sections": DEFAULT_SECTIONS, "expectations": DEFAULT_EXPECTATIONS})

    @classmethod
    def from_dict(cls, data: Mapping) -> "SkillTaxonomy":
        try:
            sections = [
                Section(
                    key=s["key"],
                    title=s.get("title", s["key"]),
                    short_label=s.get("short_label", s.get("title", s["key"])),
                    skills=tuple(s.get("skills", [])),
                )
                for s in data["sections"]
            ]
        except (KeyError, TypeError) as e:
            raise TaxonomyError(f"Malformed taxonomy definition: {e}") from e
        return cls(sections, data.get("expectations", {}))

    # --- Lookups ---

    @property
    def sections(self) -> Tuple[Section, ...]:
        return self._sections

    @property
    def section_keys(self) -> List[str]:
        return [s.key for s in self._sections]

    def section_of(self, skill: str) -> str:
        return self._section_of.get(skill, OTHER)

    def default_expectation(self, skill: str) -> Optional[int]:
        return self._expectations.get(skill)

    def skills_in(self, section_key: str) -> Tuple[str, ...]:
        section = self._section_by_key.get(section_key)
        return section.skills if section else ()

    def title_of(self, section_key: str) -> str:
        if section_key == OTHER:
            return OTHER_SECTION["title"]
        section = self._section_by_key.get(section_key)
        return section.title if section else section_key

    def short_label_of(self, section_key: str) -> str:
        if section_key == OTHER:
            return OTHER_SECTION["short_label"]
        section = self._section_by_key.get(section_key)
        return section.short_label if section else section_key


def load_taxonomy(path: Optional[str] = None) -> SkillTaxonomy:
    """
    Load a taxonomy from a JSON file shaped like
    ``{"sections": [{"key", "title", "short_label", "skills"}], "expectations": {skill: level}}``.
    Falls back to the built-in tables when no path is given.
    """
    if not path:
        return SkillTaxonomy.default()

    file_path = Path(path)
    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise TaxonomyError(f"Could not read taxonomy file {file_path}: {e}") from e

    taxonomy = SkillTaxonomy.from_dict(data)
    logger.info(f"Loaded skill taxonomy from {file_path} ({len(taxonomy.sections)} sections)")
    return taxonomy
