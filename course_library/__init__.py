"""Resource shaping and property mapping for the Course Library API."""
