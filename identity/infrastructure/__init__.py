"""Storage backends for the identity bounded context."""
