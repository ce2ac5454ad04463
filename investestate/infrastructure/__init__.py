"""Infrastructure: database engine, stores, logging and external providers."""
