"""Fragment producers - recognized text entering the follower."""
from autoscroll.sources.TranscriptFileSource import TranscriptFileSource

__all__ = ['TranscriptFileSource']
