"""Sync Jira site configuration into JSON documents for the dashboard."""
