"""Order services: vendor splitting and settlement."""
