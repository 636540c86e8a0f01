"""Runtime services shared by iterators."""
