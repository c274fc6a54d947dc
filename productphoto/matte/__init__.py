"""Background removal for accepted product photos.

Modules:
    base     — BackgroundRemover protocol
    removebg — remove.bg HTTP client
    stage    — Idempotent matting stage over a directory
"""
