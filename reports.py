"""Aggregate views over stored resumes: statistics, skill counts, comparisons, tips."""

from collections import Counter
from typing import Dict, Iterable, List

from skills import DEFAULT_TAXONOMY, SkillsTaxonomy
from store import ResumeRecord

TOP_SKILLS_LIMIT = 10
SUGGESTED_SKILLS_LIMIT = 5

SCORE_BUCKETS = ((0, 20), (20, 40), (40, 60), (60, 80), (80, 100))
OVERFLOW_BUCKET = "100+"

REPORTED_CATEGORIES = ("programming", "frameworks", "databases", "cloud")

# In-demand skills offered as suggestions, most valuable first.
POPULAR_SKILLS = (
    "javascript", "python", "java", "react", "node.js", "mongodb", "aws", "docker",
    "kubernetes", "git", "agile", "scrum", "typescript", "angular", "vue", "express",
    "django", "flask", "spring", "mysql", "postgresql", "redis", "azure", "gcp",
)


def _skill_counts(records: Iterable[ResumeRecord]) -> Counter:
    counts: Counter = Counter()
    for record in records:
        counts.update(dict.fromkeys(record.parsed_data.skills, 1))
    return counts


def _bucket_label(score: float) -> str:
    for low, high in SCORE_BUCKETS:
        if low <= score < high:
            return f"{low}-{high - 1}"
    return OVERFLOW_BUCKET


def collect_statistics(records: List[ResumeRecord]) -> Dict[str, object]:
    scores = [record.analysis.overall_score for record in records]
    average = sum(scores) / len(scores) if scores else 0

    distribution = Counter(_bucket_label(score) for score in scores)
    ordered_labels = [f"{low}-{high - 1}" for low, high in SCORE_BUCKETS] + [OVERFLOW_BUCKET]

    return {
        "total_resumes": len(records),
        "average_score": average,
        "top_skills": [
            {"skill": skill, "count": count}
            for skill, count in _skill_counts(records).most_common(TOP_SKILLS_LIMIT)
        ],
        "score_distribution": [
            {"bucket": label, "count": distribution[label]}
            for label in ordered_labels
            if distribution[label]
        ],
    }


def skill_breakdown(
    records: List[ResumeRecord], taxonomy: SkillsTaxonomy = DEFAULT_TAXONOMY
) -> Dict[str, object]:
    all_skills = [
        {"skill": skill, "count": count} for skill, count in _skill_counts(records).most_common()
    ]
    categories = {
        category: [entry for entry in all_skills if taxonomy.category_of(entry["skill"]) == category]
        for category in REPORTED_CATEGORIES
    }
    return {"all_skills": all_skills, "skill_categories": categories}


def _comparison_side(record: ResumeRecord) -> Dict[str, object]:
    return {
        "id": record.id,
        "name": record.parsed_data.name,
        "score": record.analysis.overall_score,
        "skills": list(record.parsed_data.skills),
        "experience": len(record.parsed_data.experience),
    }


def compare_records(first: ResumeRecord, second: ResumeRecord) -> Dict[str, object]:
    first_skills = first.parsed_data.skills
    second_skills = second.parsed_data.skills
    return {
        "resume1": _comparison_side(first),
        "resume2": _comparison_side(second),
        "comparison": {
            "score_difference": first.analysis.overall_score - second.analysis.overall_score,
            "common_skills": [skill for skill in first_skills if skill in second_skills],
            "unique_skills_1": [skill for skill in first_skills if skill not in second_skills],
            "unique_skills_2": [skill for skill in second_skills if skill not in first_skills],
        },
    }


def suggest_skills(current_skills: Iterable[str], limit: int = SUGGESTED_SKILLS_LIMIT) -> List[str]:
    owned = {skill.lower() for skill in current_skills}
    return [skill for skill in POPULAR_SKILLS if skill not in owned][:limit]


def improvement_tips(record: ResumeRecord) -> List[str]:
    analysis = record.analysis
    tips: List[str] = []

    if analysis.overall_score < 60:
        tips.append("Focus on adding more technical skills and experience")
    if analysis.skills_match < 30:
        tips.append("Consider learning in-demand technologies like cloud platforms")
    if analysis.experience_relevance < 20:
        tips.append("Include more detailed work experience with quantifiable achievements")

    return tips


def build_recommendations(record: ResumeRecord) -> Dict[str, object]:
    return {
        "current": list(record.analysis.recommendations),
        "strengths": list(record.analysis.strengths),
        "weaknesses": list(record.analysis.weaknesses),
        "suggested_skills": suggest_skills(record.parsed_data.skills),
        "improvement_tips": improvement_tips(record),
    }
