"""
coursefinder: course catalog search with debounced filtering and
incremental pagination.
"""
