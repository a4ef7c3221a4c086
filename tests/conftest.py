import pytest

SCENARIO_RESUME = (
    "John Smith\nSummary\nExperienced Senior Developer with 5 years.\nSkills\nPython, AWS, Docker\n"
    "Experience\nSenior Developer\nAcme Corp\n2020\nBuilt systems.\nEducation\nBachelor of Science\n"
    "MIT\n2015"
)

RICH_RESUME = """Jane Doe
jane.doe@example.com | (555) 123-4567 | Austin, TX

Professional Summary
Backend engineer with nine years building distributed services, mentoring teams and shipping reliable platforms for payments.

Technical Skills
Python, Java, TypeScript, Django, PostgreSQL, Redis, AWS, Docker, Kubernetes, Git

Work Experience
Senior Software Engineer
Globex Corp
2019 - Present
Led migration of billing services to Kubernetes.
Software Developer
Initech Systems
2016 - 2019
Built reporting APIs in Django.
Junior Developer
Hooli Inc
2014 - 2016
Maintained internal tooling.

Education
Bachelor of Science in Computer Science, 2014
State University
"""


@pytest.fixture
def scenario_resume():
    return SCENARIO_RESUME


@pytest.fixture
def rich_resume():
    return RICH_RESUME
