"""Rule-based resume analysis engine: field extraction, skill matching, scoring and feedback."""

import logging
import math
import re
from dataclasses import asdict, dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Dict, List, Optional, Set

import spacy
from spacy.matcher import PhraseMatcher

from skills import DEFAULT_TAXONOMY, SkillsTaxonomy

logger = logging.getLogger(__name__)

# --- Constants & Regex helpers -------------------------------------------------

NOT_FOUND = "Not found"
KEYWORD_LIMIT = 20
KEYWORD_MIN_LENGTH = 4

STOP_WORDS = frozenset(
    {"the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by"}
)

SUMMARY_HEADER_REGEX = re.compile(r"\b(summary|profile|objective)\b", re.IGNORECASE)
SKILLS_HEADER_REGEX = re.compile(r"\b(skills|technologies|tools)\b", re.IGNORECASE)

EXPERIENCE_START_REGEX = re.compile(r"\b(experience|work history|employment)\b", re.IGNORECASE)
EXPERIENCE_STOP_REGEX = re.compile(r"\b(education|skills|projects)\b", re.IGNORECASE)
EDUCATION_START_REGEX = re.compile(r"\b(education|academic)\b", re.IGNORECASE)
EDUCATION_STOP_REGEX = re.compile(r"\b(experience|skills|projects)\b", re.IGNORECASE)

JOB_TITLE_HINT_REGEX = re.compile(
    r"\b(senior|junior|lead|principal|software|developer|engineer|manager|analyst|consultant)",
    re.IGNORECASE,
)
COMPANY_HINT_REGEX = re.compile(
    r"\b(inc|corp|llc|ltd|company|tech|systems|solutions)", re.IGNORECASE
)
DEGREE_HINT_REGEX = re.compile(r"\b(bachelor|master|phd|diploma|certificate)", re.IGNORECASE)
YEAR_REGEX = re.compile(r"\b(?:19|20)\d{2}\b")

EMAIL_REGEX = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
PHONE_REGEX = re.compile(
    r"(?<!\w)(?:\+\d{1,3}[ \t.-]?)?(?:\(\d{3}\)[ \t]?|\d{3}[ \t.-]?)\d{3}[ \t.-]?\d{4}(?!\d)"
)
NAME_LINE_REGEX = re.compile(r"^[A-Z][a-zA-Z'\-]+(?:\s+[A-Z][a-zA-Z'\-.]*){1,2}$")
WORD_REGEX = re.compile(r"\w+")

US_STATE_CODES = frozenset(
    {
        "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA", "HI", "ID", "IL", "IN",
        "IA", "KS", "KY", "LA", "ME", "MD", "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV",
        "NH", "NJ", "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC", "SD", "TN",
        "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY", "DC",
    }
)

# Place names checked verbatim (case-sensitive) when looking for a candidate location.
LOCATION_GAZETTEER = (
    "New York", "San Francisco", "Los Angeles", "Seattle", "Chicago", "Boston", "Austin",
    "Denver", "Atlanta", "Dallas", "Houston", "Miami", "Portland", "San Diego", "San Jose",
    "Washington", "Philadelphia", "Phoenix", "Toronto", "Vancouver", "Montreal", "London",
    "Manchester", "Dublin", "Berlin", "Munich", "Paris", "Amsterdam", "Madrid", "Barcelona",
    "Lisbon", "Stockholm", "Zurich", "Warsaw", "Bangalore", "Bengaluru", "Mumbai", "Delhi",
    "Hyderabad", "Pune", "Chennai", "Singapore", "Sydney", "Melbourne", "Tokyo", "Dubai",
    "California", "Texas", "Florida", "United States", "USA", "Canada", "United Kingdom",
    "Germany", "France", "India", "Australia", "Remote",
)
LOCATION_GAZETTEER_REGEX = re.compile(
    r"\b(" + "|".join(re.escape(place) for place in LOCATION_GAZETTEER) + r")\b"
)
CITY_STATE_REGEX = re.compile(r"\b([A-Z][a-zA-Z]+(?:[ \t][A-Z][a-zA-Z]+)?),[ \t]*([A-Z]{2})\b")


class InvalidInputError(ValueError):
    """Raised when there is no text to analyze."""


# --- Data model ----------------------------------------------------------------


@dataclass(frozen=True)
class ExperienceEntry:
    title: Optional[str] = None
    company: Optional[str] = None
    duration: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class EducationEntry:
    degree: str = ""
    institution: str = ""
    year: str = ""


@dataclass(frozen=True)
class ParsedDocument:
    name: str = NOT_FOUND
    email: str = NOT_FOUND
    phone: str = NOT_FOUND
    location: str = NOT_FOUND
    summary: str = ""
    experience: List[ExperienceEntry] = field(default_factory=list)
    education: List[EducationEntry] = field(default_factory=list)
    skills: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class SkillAnalysis:
    found_skills: List[str] = field(default_factory=list)
    skill_categories: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def total_skills(self) -> int:
        return len(self.found_skills)

    def in_category(self, category: str) -> List[str]:
        return self.skill_categories.get(category, [])

    def to_dict(self) -> Dict[str, object]:
        payload = asdict(self)
        payload["total_skills"] = self.total_skills
        return payload


@dataclass(frozen=True)
class ScoreBreakdown:
    """Unrounded sub-scores; rounding happens once when the result is assembled."""

    skills_score: float
    experience_score: float
    education_score: float
    summary_score: float

    @property
    def overall(self) -> float:
        return self.skills_score + self.experience_score + self.education_score + self.summary_score


@dataclass(frozen=True)
class AnalysisResult:
    overall_score: int
    skills_match: int
    experience_relevance: int
    recommendations: List[str] = field(default_factory=list)
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class AnalysisOutcome:
    parsed_data: ParsedDocument
    analysis: AnalysisResult

    def to_dict(self) -> Dict[str, object]:
        return {"parsed_data": self.parsed_data.to_dict(), "analysis": self.analysis.to_dict()}


# --- Section scanning ----------------------------------------------------------


class ScanState(Enum):
    SEEKING_HEADER = "seeking-header"
    IN_SECTION = "in-section"
    DONE = "done"


class SectionScanner:
    """Line-by-line state machine for a section bounded by start/stop header words.

    A line matching the start pattern opens (or keeps open) the section and is
    not content itself. Once open, the first line matching the stop pattern
    ends the scan for good.
    """

    def __init__(self, start: re.Pattern, stop: re.Pattern):
        self.start = start
        self.stop = stop
        self.state = ScanState.SEEKING_HEADER

    def feed(self, line: str) -> bool:
        """Advance over one stripped line; return True if it is section content."""
        if self.state is ScanState.DONE:
            return False
        if self.start.search(line):
            self.state = ScanState.IN_SECTION
            return False
        if self.state is ScanState.IN_SECTION and self.stop.search(line):
            self.state = ScanState.DONE
            return False
        return self.state is ScanState.IN_SECTION and bool(line)


def _bounded_section(text: str, header: re.Pattern) -> Optional[str]:
    """Text following the first header match, up to the next blank line."""
    match = header.search(text)
    if not match:
        return None
    end = text.find("\n\n", match.start())
    if end < 0:
        end = len(text)
    return text[match.end():end]


# --- Skill matching ------------------------------------------------------------


@lru_cache(maxsize=1)
def _load_tokenizer():
    """Blank English pipeline; tokenization only, no statistical model needed."""
    return spacy.blank("en")


@lru_cache(maxsize=8)
def _build_phrase_matcher(taxonomy: SkillsTaxonomy) -> PhraseMatcher:
    nlp = _load_tokenizer()
    matcher = PhraseMatcher(nlp.vocab, attr="LOWER")
    for skill in taxonomy.all_skills():
        matcher.add(skill, [nlp.make_doc(skill)])
    return matcher


class SkillMatcher:
    """Finds taxonomy skills in free text.

    The default mode is case-insensitive substring containment, so short terms
    can hit inside longer words ("go" in "going"). With ``strict=True`` matches
    must align with token boundaries instead.
    """

    def __init__(self, taxonomy: SkillsTaxonomy = DEFAULT_TAXONOMY, strict: bool = False):
        self.taxonomy = taxonomy
        self.strict = strict

    def _present(self, text: str) -> Set[str]:
        if self.strict:
            nlp = _load_tokenizer()
            matcher = _build_phrase_matcher(self.taxonomy)
            doc = nlp.make_doc(text)
            return {nlp.vocab.strings[match_id] for match_id, _, _ in matcher(doc)}
        lowered = text.lower()
        return {skill for skill in self.taxonomy.all_skills() if skill in lowered}

    def find(self, text: str) -> List[str]:
        """Skills present in ``text``, in taxonomy order."""
        if not text:
            return []
        present = self._present(text)
        return [skill for skill in self.taxonomy.all_skills() if skill in present]

    def match(self, text: str) -> SkillAnalysis:
        found = self.find(text)
        hits = set(found)
        categories = {
            category: [skill for skill in skills if skill in hits]
            for category, skills in self.taxonomy.items()
        }
        return SkillAnalysis(found_skills=found, skill_categories=categories)


# --- Field extraction ----------------------------------------------------------


def _first_match(pattern: re.Pattern, text: str) -> str:
    match = pattern.search(text)
    return match.group(0).strip() if match else NOT_FOUND


def _is_keyword_line(line: str) -> bool:
    return any(
        regex.search(line)
        for regex in (
            SUMMARY_HEADER_REGEX,
            SKILLS_HEADER_REGEX,
            EXPERIENCE_START_REGEX,
            EDUCATION_START_REGEX,
            EXPERIENCE_STOP_REGEX,
            JOB_TITLE_HINT_REGEX,
            COMPANY_HINT_REGEX,
            DEGREE_HINT_REGEX,
            LOCATION_GAZETTEER_REGEX,
        )
    )


def extract_name(lines: List[str]) -> str:
    for line in lines:
        if NAME_LINE_REGEX.match(line) and not _is_keyword_line(line):
            return line
    return NOT_FOUND


def extract_location(text: str) -> str:
    candidates = []
    gazetteer_hit = LOCATION_GAZETTEER_REGEX.search(text)
    if gazetteer_hit:
        candidates.append((gazetteer_hit.start(), gazetteer_hit.group(0)))
    for match in CITY_STATE_REGEX.finditer(text):
        if match.group(2) in US_STATE_CODES:
            candidates.append((match.start(), match.group(0)))
            break
    if not candidates:
        return NOT_FOUND
    # earliest wins; "City, ST" beats a bare city at the same offset
    return min(candidates, key=lambda candidate: (candidate[0], -len(candidate[1])))[1]


def extract_summary(text: str) -> str:
    body = _bounded_section(text, SUMMARY_HEADER_REGEX)
    return body.strip() if body else ""


def extract_experience(lines: List[str]) -> List[ExperienceEntry]:
    scanner = SectionScanner(EXPERIENCE_START_REGEX, EXPERIENCE_STOP_REGEX)
    entries: List[ExperienceEntry] = []
    current: Dict[str, str] = {}

    for line in lines:
        if not scanner.feed(line):
            if scanner.state is ScanState.DONE:
                break
            continue

        if JOB_TITLE_HINT_REGEX.search(line) and "title" not in current:
            current["title"] = line
        elif COMPANY_HINT_REGEX.search(line) and "company" not in current:
            current["company"] = line
        elif YEAR_REGEX.search(line) and "duration" not in current:
            current["duration"] = line
        elif "title" in current and "company" in current:
            current["description"] = line
            entries.append(ExperienceEntry(**current))
            current = {}

    if current:
        logger.debug("Dropping unfinished experience entry without description: %s", current)
    return entries


def extract_education(lines: List[str]) -> List[EducationEntry]:
    scanner = SectionScanner(EDUCATION_START_REGEX, EDUCATION_STOP_REGEX)
    entries: List[EducationEntry] = []

    for idx, line in enumerate(lines):
        if not scanner.feed(line):
            if scanner.state is ScanState.DONE:
                break
            continue
        if not DEGREE_HINT_REGEX.search(line):
            continue

        institution = lines[idx + 1] if idx + 1 < len(lines) else ""
        year = ""
        # year sits on the degree line, or on one of the two lines below it
        for offset, candidate in enumerate(lines[idx:idx + 3]):
            if offset and DEGREE_HINT_REGEX.search(candidate):
                break
            year_match = YEAR_REGEX.search(candidate)
            if year_match:
                year = year_match.group(0)
                break
        entries.append(EducationEntry(degree=line, institution=institution, year=year))

    return entries


class FieldExtractor:
    """Turns raw resume text into a ParsedDocument."""

    def __init__(self, matcher: SkillMatcher):
        self.matcher = matcher

    def extract_skills(self, text: str) -> List[str]:
        skills: List[str] = []
        section = _bounded_section(text, SKILLS_HEADER_REGEX)
        if section:
            skills.extend(self.matcher.find(section))
        skills.extend(skill for skill in self.matcher.find(text) if skill not in skills)
        return skills

    def extract(self, text: str) -> ParsedDocument:
        lines = [line.strip() for line in text.splitlines()]
        return ParsedDocument(
            name=extract_name([line for line in lines if line]),
            email=_first_match(EMAIL_REGEX, text),
            phone=_first_match(PHONE_REGEX, text),
            location=extract_location(text),
            summary=extract_summary(text),
            experience=extract_experience(lines),
            education=extract_education(lines),
            skills=self.extract_skills(text),
        )


# --- Scoring -------------------------------------------------------------------


def _round_score(value: float) -> int:
    return int(math.floor(value + 0.5))


def score_resume(parsed: ParsedDocument, skills: SkillAnalysis) -> ScoreBreakdown:
    summary_length = len(parsed.summary)
    return ScoreBreakdown(
        skills_score=min(skills.total_skills * 2, 40),
        experience_score=min(len(parsed.experience) * 5, 30),
        education_score=min(len(parsed.education) * 5, 15),
        summary_score=15 if summary_length > 50 else summary_length / 3,
    )


# --- Feedback ------------------------------------------------------------------


def generate_recommendations(parsed: ParsedDocument, skills: SkillAnalysis) -> List[str]:
    recommendations: List[str] = []

    if skills.total_skills < 5:
        recommendations.append("Add more technical skills to your resume")
    if len(parsed.experience) < 2:
        recommendations.append("Include more work experience or internships")
    if len(parsed.summary) < 50:
        recommendations.append("Add a comprehensive professional summary")
    if not parsed.education:
        recommendations.append("Include your educational background")
    if not skills.in_category("programming"):
        recommendations.append("Consider adding programming languages to your skills")

    return recommendations


def identify_strengths(parsed: ParsedDocument, skills: SkillAnalysis) -> List[str]:
    strengths: List[str] = []

    if skills.total_skills >= 8:
        strengths.append("Strong technical skillset")
    if len(parsed.experience) >= 3:
        strengths.append("Good work experience")
    if len(parsed.summary) > 100:
        strengths.append("Well-written professional summary")
    if len(skills.in_category("programming")) >= 3:
        strengths.append("Strong programming background")

    return strengths


def identify_weaknesses(parsed: ParsedDocument, skills: SkillAnalysis) -> List[str]:
    weaknesses: List[str] = []

    if skills.total_skills < 5:
        weaknesses.append("Limited technical skills")
    if len(parsed.experience) < 2:
        weaknesses.append("Limited work experience")
    if len(parsed.summary) < 50:
        weaknesses.append("Missing or weak professional summary")
    if not skills.in_category("cloud"):
        weaknesses.append("No cloud computing skills mentioned")

    return weaknesses


# --- Keywords ------------------------------------------------------------------


def extract_keywords(text: str, limit: int = KEYWORD_LIMIT) -> List[str]:
    """First ``limit`` meaningful tokens in document order."""
    keywords: List[str] = []
    limit = min(limit, KEYWORD_LIMIT)
    if not text or limit <= 0:
        return keywords
    for token in WORD_REGEX.findall(text.lower()):
        if len(token) < KEYWORD_MIN_LENGTH or token in STOP_WORDS:
            continue
        keywords.append(token)
        if len(keywords) >= limit:
            break
    return keywords


# --- Main analysis entry point -------------------------------------------------


class ResumeAnalyzer:
    """Runs the full text -> parsed data + analysis pipeline.

    Holds only read-only state, so one instance can serve concurrent callers.
    """

    def __init__(
        self,
        taxonomy: SkillsTaxonomy = DEFAULT_TAXONOMY,
        strict_skill_matching: bool = False,
        keyword_limit: int = KEYWORD_LIMIT,
    ):
        self.taxonomy = taxonomy
        self.matcher = SkillMatcher(taxonomy, strict=strict_skill_matching)
        self.extractor = FieldExtractor(self.matcher)
        if keyword_limit > KEYWORD_LIMIT:
            logger.warning("Keyword limit %d is above the cap; using %d", keyword_limit, KEYWORD_LIMIT)
        self.keyword_limit = max(0, min(keyword_limit, KEYWORD_LIMIT))

    def analyze(self, text: Optional[str]) -> AnalysisOutcome:
        if text is None or not text.strip():
            raise InvalidInputError("No resume text provided.")

        parsed = self.extractor.extract(text)
        skill_analysis = self.matcher.match(text)
        breakdown = score_resume(parsed, skill_analysis)

        analysis = AnalysisResult(
            overall_score=_round_score(breakdown.overall),
            skills_match=_round_score(breakdown.skills_score),
            experience_relevance=_round_score(breakdown.experience_score),
            recommendations=generate_recommendations(parsed, skill_analysis),
            strengths=identify_strengths(parsed, skill_analysis),
            weaknesses=identify_weaknesses(parsed, skill_analysis),
            keywords=extract_keywords(text, self.keyword_limit),
        )
        logger.debug(
            "Analyzed resume: %d skills, %d experience entries, %d education entries, score %d",
            skill_analysis.total_skills,
            len(parsed.experience),
            len(parsed.education),
            analysis.overall_score,
        )
        return AnalysisOutcome(parsed_data=parsed, analysis=analysis)


@lru_cache(maxsize=1)
def _default_analyzer() -> ResumeAnalyzer:
    return ResumeAnalyzer()


def analyze_resume(text: Optional[str], analyzer: Optional[ResumeAnalyzer] = None) -> AnalysisOutcome:
    return (analyzer or _default_analyzer()).analyze(text)
