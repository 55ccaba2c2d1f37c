# Application services: use-cases orchestrating repositories and external adapters
