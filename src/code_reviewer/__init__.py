"""AI code review service backed by GitHub and an LLM."""
