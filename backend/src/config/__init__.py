"""Configuration package for the clubstats backend."""
