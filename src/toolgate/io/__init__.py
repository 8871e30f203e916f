"""I/O adapters: cache stores."""
