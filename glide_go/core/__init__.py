"""Process-level plumbing: settings, logging, middleware, error capture."""
