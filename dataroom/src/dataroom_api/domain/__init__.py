"""Domain types shared by the engine, services and API layers."""
