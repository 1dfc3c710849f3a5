"""Configuration, logging, errors and client lifecycle."""
