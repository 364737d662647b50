"""Host adapters for rendering surfaces."""
