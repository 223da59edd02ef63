"""Application layer - the broadcast coordinator and device use cases."""
