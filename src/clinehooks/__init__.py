"""clinehooks: run lifecycle hook scripts and combine their decisions."""

__version__ = "0.1.0"
