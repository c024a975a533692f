"""Sample documents and demo queries for seeding a test index."""

SAMPLE_COLUMNS = ("title", "content")

SAMPLE_DOCUMENTS = [
    {
        "title": "TypeScript Guide",
        "content": "A comprehensive guide to TypeScript programming language",
    },
    {
        "title": "JavaScript Basics",
        "content": "Learn the basics of JavaScript web programming",
    },
    {
        "title": "Programming Languages",
        "content": "TypeScript is a superset of JavaScript",
    },
    {
        "title": "Web Development",
        "content": "Modern web development with JavaScript and TypeScript",
    },
]

# Raw FTS5 expressions, run without translation
DEMO_FTS_QUERIES = [
    "programming",
    '"programming"',
    '"programming language"',
    "programming NOT javascript",
    '"programming" NOT "javascript"',
    'programming NOT "javascript" NOT "python"',
    '"programming" NOT "javascript" NOT "python"',
]
