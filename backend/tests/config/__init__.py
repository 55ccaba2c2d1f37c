# Shared pytest configuration (markers) imported by conftest.py
