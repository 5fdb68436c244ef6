"""Configuration, logging, generation clients and the generation pipeline."""
