"""NiceGUI front end demonstrating safe and unsafe detached operations."""
