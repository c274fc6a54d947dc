"""Product photo acquisition.

Modules:
    base        — CandidateSource, ImageFetcher, ImageClassifier protocols
    query       — Search query and file key derivation
    search      — Google Images results-page scraping
    fetcher     — Streamed candidate downloads
    validator   — Gemini yes/no validation (fail-closed)
    controller  — Per-item acquisition state machine
"""
