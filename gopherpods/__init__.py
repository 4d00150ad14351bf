"""GopherPods: a community-curated catalog of Go podcast episodes."""

__version__ = "1.0.0"
