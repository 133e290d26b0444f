"""Prompt templates for proposal sections."""
