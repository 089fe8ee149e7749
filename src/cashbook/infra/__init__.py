"""Infrastructure: database engine and gateway implementations."""
