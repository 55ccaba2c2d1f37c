# Repositories package: SQLAlchemy data access, one class per aggregate
