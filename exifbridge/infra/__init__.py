"""Infrastructure layer: OS process plumbing behind the execution strategies."""
