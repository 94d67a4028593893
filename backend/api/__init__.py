"""
Taskboard API package.

Provides the FastAPI application (api.app:app, built by create_app) for the
task management service. The app is not imported here so that module route
files can depend on api.middleware without importing the whole application.
"""
