"""Color model, drawing surfaces and image export."""
