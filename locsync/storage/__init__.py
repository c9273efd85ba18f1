"""Local persistence: per-language locale files and the upstream cache."""
