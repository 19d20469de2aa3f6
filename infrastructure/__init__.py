"""Cross-cutting infrastructure: settings, logging, locking and observability."""
