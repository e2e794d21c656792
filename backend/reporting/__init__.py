"""Pure reporting functions over clinic records: windows, pages and aggregates."""
