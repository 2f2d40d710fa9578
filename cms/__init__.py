"""TXT-ME CMS backend: auth, posts, comments, profiles and avatars."""

__version__ = "0.1.0"
