"""Infrastructure layer: persistence, rendering, storage and side-effect services."""
