"""Fact Check Aggregator - AI credibility assessment for selected text.

Sends a piece of text to one or more AI fact-checking backends, parses each
free-text report, merges them into a single report and links inline
citation markers to the merged source list.

Components:
- parsing: raw backend text -> FactCheckReport
- pipeline: concurrent backend fan-out (run) and report merging (reconcile)
- rendering: citation linking and plain-text export
- backends: Perplexity and Groq+Toolhouse clients
- main_api: FastAPI endpoint used by the browser extension
"""
