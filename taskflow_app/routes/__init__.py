"""
Routes package for the TaskFlow application.

This package contains route blueprints:
- auth: login, signup, logout and the health probe
- tasks: the task list page and its editor modal actions
"""
