"""Note store, debounced persistence and route synchronization."""
