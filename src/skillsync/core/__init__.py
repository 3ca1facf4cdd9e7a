"""Core building blocks: content hashing and the project lock file."""
