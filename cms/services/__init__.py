"""Domain services: registration, login, ownership, avatars, profile, posts and comments."""
