"""Adapters to the workflow store, the HR feed and local storage."""
