"""Domain core: exceptions, session lifecycle rules and the AI companion."""
