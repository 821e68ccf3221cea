"""hashnotes - short local notes with deep-linkable selection."""

__version__ = "0.1.0"
