"""Core configuration, logging and database setup for docsync."""
