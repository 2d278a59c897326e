"""Typed wrappers around the Google Workspace and Chrome Enterprise REST APIs."""
