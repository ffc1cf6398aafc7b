"""Menu catalog backend: categorized listings and their image uploads."""
