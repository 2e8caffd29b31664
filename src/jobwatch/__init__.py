"""Polling monitor for remotely scheduled jobs and their execution logs."""
