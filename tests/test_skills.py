"""
Unit tests for the skills taxonomy.
"""

import pytest

from skills import DEFAULT_TAXONOMY, SKILLS_TAXONOMY, SkillsTaxonomy, TaxonomyError


class TestDefaultTaxonomy:
    """Tests for the built-in category table."""

    def test_categories_in_declaration_order(self):
        assert DEFAULT_TAXONOMY.categories == (
            "programming", "frameworks", "databases", "cloud", "tools", "methodologies",
        )

    def test_lookup_returns_category_skills(self):
        assert "python" in DEFAULT_TAXONOMY.lookup("programming")
        assert DEFAULT_TAXONOMY.lookup("cloud")[0] == "aws"

    def test_lookup_unknown_category_is_empty(self):
        assert DEFAULT_TAXONOMY.lookup("cooking") == ()

    def test_all_skills_flattened_in_category_order(self):
        all_skills = DEFAULT_TAXONOMY.all_skills()
        assert all_skills[0] == "javascript"
        assert all_skills[-1] == "ci/cd"
        assert len(all_skills) == len(set(all_skills))
        assert len(all_skills) == sum(len(skills) for skills in SKILLS_TAXONOMY.values())

    def test_category_of_is_case_insensitive(self):
        assert DEFAULT_TAXONOMY.category_of("Docker") == "cloud"
        assert DEFAULT_TAXONOMY.category_of("  JIRA ") == "tools"

    def test_category_of_unknown_skill(self):
        assert DEFAULT_TAXONOMY.category_of("cobol") is None
        assert DEFAULT_TAXONOMY.category_of("") is None

    def test_membership(self):
        assert "Python" in DEFAULT_TAXONOMY
        assert "cobol" not in DEFAULT_TAXONOMY

    def test_skills_are_lower_case(self):
        for skill in DEFAULT_TAXONOMY.all_skills():
            assert skill == skill.lower()


class TestTaxonomyValidation:
    """A malformed taxonomy must fail at construction."""

    def test_empty_category_rejected(self):
        with pytest.raises(TaxonomyError, match="no skills"):
            SkillsTaxonomy({"programming": ["python"], "cloud": []})

    def test_upper_case_skill_rejected(self):
        with pytest.raises(TaxonomyError, match="lower-case"):
            SkillsTaxonomy({"programming": ["Python"]})

    def test_skill_in_two_categories_rejected(self):
        with pytest.raises(TaxonomyError, match="both"):
            SkillsTaxonomy({"programming": ["python"], "scripting": ["python"]})

    def test_taxonomy_is_read_only(self):
        taxonomy = SkillsTaxonomy({"programming": ["python"]})
        with pytest.raises(TypeError):
            taxonomy._categories["cloud"] = ("aws",)
