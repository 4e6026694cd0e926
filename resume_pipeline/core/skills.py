"""
Dictionary-based skill extraction.
"""

import re
from typing import List, Optional

# Canonical spelling; output follows this order.
SKILL_DICTIONARY = (
    "Java", "Python", "JavaScript", "C++", "C#", "Ruby", "Go", "TypeScript", "PHP", "Swift",
    "React", "Angular", "Vue.js", "Node.js", "Spring Boot", "Django", "Flask", "Ruby on Rails",
    "SQL", "PostgreSQL", "MySQL", "MongoDB", "Redis", "Oracle",
    "AWS", "Azure", "Google Cloud", "Docker", "Kubernetes",
    "HTML", "CSS", "Sass", "Less",
    "Agile", "Scrum", "JIRA", "Git", "Jenkins",
)

# \b fails around "+" and "#", so boundaries are spelled out: "C++" must not
# match inside "C+++" and "Java" must not match inside "JavaScript".
SKILL_PATTERNS = tuple(
    (skill, re.compile(r"(?<![\w+#.])" + re.escape(skill) + r"(?![\w+#])", re.IGNORECASE))
    for skill in SKILL_DICTIONARY
)


def find_skills(text: Optional[str]) -> List[str]:
    if not text:
        return []
    return [skill for skill, pattern in SKILL_PATTERNS if pattern.search(text)]


def extract_skills(text: Optional[str]) -> str:
    """
    Skills mentioned in text, comma-joined in dictionary order.

    Example:
        "Python, docker and C++ daily" -> "Python, C++, Docker"
    """
    return ", ".join(find_skills(text))
