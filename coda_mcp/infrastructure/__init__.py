"""Infrastructure Layer — logging setup and the outbound HTTP client."""
