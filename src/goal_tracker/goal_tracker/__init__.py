"""Goal Tracker package.

Objectives, key results and progress logging for the employee management
app, organized like the other feature modules: model, repository, service
and a thin Flask controller.
"""
