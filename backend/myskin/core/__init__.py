# Core package initialization
# Configuration, logging, security and cross-cutting helpers
