"""SQLAlchemy persistence: engine setup, ORM models and repositories."""
