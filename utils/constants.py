"""
Constants and prompt templates for the Gemini Assist Bridge.
Placeholders use the literal {TOKEN} form and are filled by prompt_builder.render_template.
"""

# Placeholders
class Placeholders:
    """Literal placeholder tokens used in prompt templates."""
    TEXT = "{TEXT}"
    MESSAGE = "{MESSAGE}"
    URL = "{URL}"
    CONTENT = "{CONTENT}"
    INSTRUCTION = "{INSTRUCTION}"
    TABLE = "{TABLE}"
    COLUMNS = "{COLUMNS}"
    MAX_RESULTS = "{MAX_RESULTS}"
    RESULTS = "{RESULTS}"


# Default few-shot prompt for keyword extraction
KEYWORD_EXTRACTION_PROMPT = """Extract 1-3 search keywords from the text below.
Return ONLY a JSON array of lowercase strings. NO explanations. NO other text.

EXAMPLES:
Text: "Find rice suppliers in Colombo"
["rice", "suppliers", "colombo"]

Text: "Do you have any organic tea?"
["organic", "tea"]

Text: "show me cinnamon"
["cinnamon"]

Text: "{TEXT}"
"""

# Directive appended to the caller's classification prompt
SEARCH_DIRECTIVE = """Answer with exactly one word: SEARCH_NEEDED if answering requires looking up data, otherwise NO_SEARCH.
NO explanations. NO other text."""

# Labels understood by the intent classifier
SEARCH_LABEL = "SEARCH"
NO_SEARCH_LABEL = "NO_SEARCH"

# Default instruction when scraping without a caller instruction
DEFAULT_SCRAPE_INSTRUCTION = "Summarize the main content of this page in a few short paragraphs."

SCRAPE_PROMPT = """{INSTRUCTION}

Page URL: {URL}
Page content:
---
{CONTENT}
---"""

# Prompt for answering a keyword lookup
QUERY_RESPONSE_PROMPT = """You are a helpful assistant answering questions from database search results.
The table "{TABLE}" was searched on the columns: {COLUMNS} (at most {MAX_RESULTS} results).

Search results:
---
{RESULTS}
---

User question: {MESSAGE}

INSTRUCTIONS:
- Answer using only the search results above.
- If the results are empty or do not answer the question, say so politely.
- Keep the answer short and conversational."""


# Chat prompt section labels
class Sections:
    """Fixed labels for the assembled chat prompt."""
    HISTORY = "Conversation history:"
    CONTEXT = "Relevant data:"
    USER = "User:"
    RESPOND = "Respond:"
    CLASSIFY_MESSAGE = "User message:"


class Endpoints:
    """Endpoint names used in transport errors and logs."""
    COMPLETION = "completion"
    READER = "reader"
