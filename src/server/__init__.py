"""HTTP server for the browser UI."""
