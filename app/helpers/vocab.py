"""
Fixed vocabularies used by the keyword filter and the skills matcher.

Both are immutable and built once at import time; callers pass them
explicitly into the functions that use them.
"""

# Common English function words: articles, conjunctions, prepositions,
# pronouns and modal verbs.
STOP_WORDS = frozenset([
    "a", "an", "the", "and", "or", "but", "nor", "if", "then",
    "of", "to", "in", "on", "for", "with", "by", "at", "from", "as", "into",
    "is", "are", "was", "were", "be", "been",
    "this", "that", "these", "those", "it", "its",
    "we", "you", "they", "our", "your", "their",
    "will", "can", "should", "would", "must", "may",
])

DEFAULT_SKILLS = (
    "javascript", "typescript", "react", "node", "node.js", "next.js",
    "python", "java", "c++", "sql", "nosql", "aws", "gcp", "azure",
    "docker", "kubernetes", "terraform", "ci/cd", "github actions",
    "ml", "nlp", "tensorflow", "pytorch", "golang", "ruby", "php",
    "html", "css", "tailwind", "jira", "git", "agile", "scrum",
    "kafka", "spark", "hadoop", "linux", "bash", "rest", "graphql",
    "microservices", "postgresql", "mongodb", "redis", "fastapi", "django",
)

# Hits at which the skills component of the score saturates
SKILL_SATURATION = 10
