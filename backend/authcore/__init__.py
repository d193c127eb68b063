"""Credential and session lifecycle service."""
