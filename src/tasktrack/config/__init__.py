"""Configuration — project root discovery, settings models, logging setup."""
