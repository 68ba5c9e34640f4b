"""
mdBook preprocessor for validating or fixing frontmatter against a JSON schema.

Configure it in `book.toml`:

    [preprocessor.frontmatter]
    command = "mdbook-frontmatter"
    schema = "https://example.com/schema.json"  # or file:///path/to/schema.json
    mode = "validate"  # or "fix"
"""
__version__ = "0.1.0"
