"""Page classes for the NiceGUI routes."""
