"""Configuration defaults and environment-driven settings."""
