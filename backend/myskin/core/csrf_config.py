"""
CSRF protection configuration.

This module provides a centralized CSRFProtect instance that can be:
1. Initialized in main.py with the Flask app
2. Imported in controllers to use the @csrf.exempt decorator

The JSON API blueprints are exempted in main.py: they are called with
``fetch`` from the storefront and rely on SameSite cookies plus the
admin JWT cookie instead of form tokens.
"""

from flask_wtf.csrf import CSRFProtect

# Global CSRF instance - initialized in create_app()
csrf = CSRFProtect()
