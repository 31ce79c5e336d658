"""Container decoders: one module per file format."""
