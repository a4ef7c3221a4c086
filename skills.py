# skills.py
# This is our central "knowledge base" of the skills every resume is scored against.

# The "key" is the category name.
# The "value" is the ordered list of canonical (lower-case) skill names in that category.

from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

SKILLS_TAXONOMY: Dict[str, Tuple[str, ...]] = {
    "programming": (
        "javascript", "python", "java", "c++", "c#", "php", "ruby", "go", "rust",
        "swift", "kotlin", "typescript",
    ),
    "frameworks": (
        "react", "angular", "vue", "node.js", "express", "django", "flask", "spring",
        "laravel", "asp.net",
    ),
    "databases": ("mysql", "postgresql", "mongodb", "redis", "sqlite", "oracle", "sql server"),
    "cloud": ("aws", "azure", "gcp", "docker", "kubernetes", "terraform", "jenkins"),
    "tools": (
        "git", "github", "gitlab", "jira", "confluence", "slack", "trello", "figma", "adobe",
    ),
    "methodologies": ("agile", "scrum", "kanban", "waterfall", "devops", "ci/cd"),
}


class TaxonomyError(ValueError):
    """Raised when the skills taxonomy is malformed."""


class SkillsTaxonomy:
    """Read-only category -> skills table used for matching."""

    def __init__(self, categories: Mapping[str, Iterable[str]]):
        frozen: Dict[str, Tuple[str, ...]] = {}
        owner: Dict[str, str] = {}
        for category, skills in categories.items():
            skills = tuple(skills)
            if not skills:
                raise TaxonomyError(f"Category '{category}' has no skills.")
            for skill in skills:
                if skill != skill.lower().strip():
                    raise TaxonomyError(f"Skill '{skill}' is not in lower-case canonical form.")
                if skill in owner and owner[skill] != category:
                    raise TaxonomyError(
                        f"Skill '{skill}' listed under both '{owner[skill]}' and '{category}'."
                    )
                owner[skill] = category
            frozen[category] = skills

        self._categories = MappingProxyType(frozen)
        self._owner = MappingProxyType(owner)
        self._all = tuple(dict.fromkeys(skill for skills in frozen.values() for skill in skills))

    @property
    def categories(self) -> Tuple[str, ...]:
        return tuple(self._categories)

    def items(self):
        return self._categories.items()

    def lookup(self, category: str) -> Tuple[str, ...]:
        return self._categories.get(category, ())

    def all_skills(self) -> Tuple[str, ...]:
        return self._all

    def category_of(self, skill: str) -> Optional[str]:
        if not skill:
            return None
        return self._owner.get(skill.strip().lower())

    def __contains__(self, skill: object) -> bool:
        return isinstance(skill, str) and skill.strip().lower() in self._owner

    def __len__(self) -> int:
        return len(self._all)

    def __repr__(self) -> str:
        return f"SkillsTaxonomy(categories={list(self._categories)!r}, skills={len(self._all)})"


DEFAULT_TAXONOMY = SkillsTaxonomy(SKILLS_TAXONOMY)
