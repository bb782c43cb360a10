"""Backend packages for the media cache."""
