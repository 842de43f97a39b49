"""Credential stores and the authorization policy for chat endpoints."""
