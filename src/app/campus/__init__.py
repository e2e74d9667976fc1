"""Campus data store -- models, read schemas, and repository for the campus agents.

Provides SQLAlchemy models (dining, academics, events, live campus feeds,
reminders), pydantic read schemas, and CampusRepository for async access.
"""
