"""Application services orchestrating core logic and boundary adapters."""
