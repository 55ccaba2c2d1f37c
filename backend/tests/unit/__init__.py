"""
Unit tests package.

Contains isolated unit tests for models, services, repositories,
and other components that can be tested in isolation without
external dependencies like databases or HTTP requests.
"""
