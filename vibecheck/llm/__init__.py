"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Build a prompt from the group's taste when no voted place works for everyone.
- Call Groq to suggest fresh types of places to search for.
- Treat any failure (timeout, API error, bad JSON) as "no suggestions".
"""
