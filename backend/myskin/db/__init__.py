# Database package: engine/session management, models and seed helpers
