"""Synchronization with the external project/speaker datastore."""
