"""HTTP middleware: request ids, access logging, error → problem+json mapping."""
