"""Configuration — pydantic section models, settings, and logging setup."""
