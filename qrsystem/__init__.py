"""QR code generation, history and sharing API."""
